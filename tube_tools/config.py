import os
import logging
from dataclasses import dataclass, fields
from typing import Dict, List, Optional
from urllib.parse import urlparse
from dotenv import load_dotenv

from tube_tools.errors import ConfigError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "PEERTUBE_URL",
    "PEERTUBE_USERNAME",
    "PEERTUBE_PASSWORD",
    "PEERTUBE_CHANNEL",
    "S3_ENDPOINT",
    "S3_ACCESS_KEY",
    "S3_SECRET_KEY",
    "S3_BUCKET",
)
URL_FIELDS = ("PEERTUBE_URL", "S3_ENDPOINT")


@dataclass
class Settings:
    # PeerTube
    PEERTUBE_URL: str = ""
    PEERTUBE_USERNAME: str = ""
    PEERTUBE_PASSWORD: str = ""
    PEERTUBE_CHANNEL: str = ""
    PEERTUBE_PAGE_SIZE: int = 50

    # S3-compatible backup bucket
    S3_ENDPOINT: str = ""
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_BUCKET: str = ""
    S3_REGION: str = "us-east-1"
    S3_PAGE_SIZE: int = 1000

    # Local bookkeeping (created/ and uploaded/ live here)
    DATA_DIR: str = "~/.tube-tools"
    HTTP_TIMEOUT: float = 30.0

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Build settings from environment variables. Values are not validated here."""
        environ = os.environ if environ is None else environ
        problems = []
        values = {}
        for f in fields(cls):
            raw = environ.get(f.name)
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            if f.type is int:
                try:
                    values[f.name] = int(raw)
                except ValueError:
                    problems.append(f"{f.name} must be an integer, got {raw!r}")
            elif f.type is float:
                try:
                    values[f.name] = float(raw)
                except ValueError:
                    problems.append(f"{f.name} must be a number, got {raw!r}")
            else:
                values[f.name] = raw
        if problems:
            raise ConfigError(problems)
        return cls(**values)

    @property
    def data_dir(self) -> str:
        return os.path.abspath(os.path.expanduser(self.DATA_DIR))

    @property
    def peertube_url(self) -> str:
        return self.PEERTUBE_URL.rstrip("/")

    def problems(self) -> List[str]:
        """Return a description of every invalid or missing value."""
        found = []
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                found.append(f"{name} is required")
        for name in URL_FIELDS:
            value = getattr(self, name)
            if value and not _is_http_url(value):
                found.append(f"{name} must be an http(s) URL, got {value!r}")
        if not 1 <= self.PEERTUBE_PAGE_SIZE <= 100:
            found.append("PEERTUBE_PAGE_SIZE must be between 1 and 100")
        if not 1 <= self.S3_PAGE_SIZE <= 1000:
            found.append("S3_PAGE_SIZE must be between 1 and 1000")
        if self.HTTP_TIMEOUT <= 0:
            found.append("HTTP_TIMEOUT must be positive")
        return found

    def validate(self) -> "Settings":
        found = self.problems()
        if found:
            raise ConfigError(found)
        return self


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """Load .env, read the environment and fail fast on anything missing."""
    if environ is None:
        load_dotenv()
    settings = Settings.from_env(environ).validate()
    logger.debug(f"Loaded settings for {settings.peertube_url} (bucket: {settings.S3_BUCKET})")
    return settings
