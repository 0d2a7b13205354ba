import hashlib
import logging

logger = logging.getLogger(__name__)

FINGERPRINT_BYTES = 1024 * 1024  # 1 MiB
READ_CHUNK_BYTES = 64 * 1024


def get_file_hash(file_path: str, limit: int = FINGERPRINT_BYTES) -> str:
    """SHA-256 (lowercase hex) of the first `limit` bytes of a file.

    Only the prefix is read, so this is cheap even for multi-gigabyte videos.
    The path and file metadata do not influence the result.
    """
    digest = hashlib.sha256()
    remaining = limit
    with open(file_path, "rb") as f:
        while remaining > 0:
            chunk = f.read(min(READ_CHUNK_BYTES, remaining))
            if not chunk:
                break
            digest.update(chunk)
            remaining -= len(chunk)
    fingerprint = digest.hexdigest()
    logger.debug(f"Fingerprint of {file_path}: {fingerprint}")
    return fingerprint
