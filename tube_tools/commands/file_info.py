import json

from tube_tools.services.fingerprint import get_file_hash
from tube_tools.services.metadata_service import MetadataService


class HashCommand:
    """Print the fingerprint (SHA-256 of the first MiB) of a file."""

    def run(self, file_path: str) -> str:
        fingerprint = get_file_hash(file_path)
        print(fingerprint)
        return fingerprint


class MetadataCommand:
    """Print the metadata ffprobe reads from a video file."""

    def __init__(self, metadata_service: MetadataService = None):
        self.metadata_service = metadata_service or MetadataService()

    def run(self, file_path: str) -> dict:
        metadata = self.metadata_service.probe(file_path)
        print(json.dumps(metadata, indent=2))
        return metadata
