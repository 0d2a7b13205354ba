"""Command-line tools to keep a PeerTube channel and its S3 originals in sync."""

__version__ = "0.1.0"
