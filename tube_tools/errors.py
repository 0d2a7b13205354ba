class TubeToolsError(Exception):
    """Base class for errors raised by tube-tools itself."""


class ConfigError(TubeToolsError):
    """Required configuration is missing or invalid."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


class MalformedBackupKeyError(TubeToolsError, ValueError):
    """A backup object key does not follow the originals/<uuid><ext> convention."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed backup key {key!r}: {reason}")


class PeerTubeError(TubeToolsError):
    """PeerTube answered in a way we cannot use."""
