import os
import re
import mimetypes
import logging
from typing import Dict, Iterator, Optional
import boto3
from botocore.client import Config

from tube_tools.errors import MalformedBackupKeyError

logger = logging.getLogger(__name__)

ORIGINALS_PREFIX = "originals"
ORIGINALS_KEY_PREFIX = ORIGINALS_PREFIX + "/"
UUID_LENGTH = 36
UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


def get_s3(endpoint_url: str, access_key: str, secret_key: str, region: str = "us-east-1"):
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        region_name=region,
        config=Config(s3={"addressing_style": "path"}),
    )


def get_s3_from_settings(settings):
    return get_s3(settings.S3_ENDPOINT, settings.S3_ACCESS_KEY, settings.S3_SECRET_KEY, settings.S3_REGION)


def backup_key_for(file_path: str, uuid: str) -> str:
    """originals/<uuid><ext>, keeping the file's extension (with its dot)."""
    ext = os.path.splitext(file_path)[1]
    return f"{ORIGINALS_KEY_PREFIX}{uuid}{ext}"


def uuid_from_backup_key(key: str) -> str:
    """Extract the 36-character video UUID from an originals/<uuid><ext> key."""
    if not key.startswith(ORIGINALS_KEY_PREFIX):
        raise MalformedBackupKeyError(key, f"does not start with {ORIGINALS_KEY_PREFIX!r}")
    start = len(ORIGINALS_KEY_PREFIX)
    uuid = key[start:start + UUID_LENGTH]
    if len(uuid) < UUID_LENGTH:
        raise MalformedBackupKeyError(key, f"too short to hold a {UUID_LENGTH}-character UUID")
    if not UUID_RE.match(uuid):
        raise MalformedBackupKeyError(key, f"{uuid!r} is not a canonical UUID")
    return uuid


def iter_backup_objects(s3, bucket: str, prefix: str = ORIGINALS_PREFIX, page_size: int = 1000) -> Iterator[Dict]:
    """Yield every object summary under `prefix`, following continuation tokens."""
    continuation_token: Optional[str] = None
    page = 0
    while True:
        params = {"Bucket": bucket, "Prefix": prefix, "MaxKeys": page_size}
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        resp = s3.list_objects_v2(**params)
        page += 1

        contents = resp.get("Contents", [])
        logger.debug(f"s3://{bucket}/{prefix} page {page}: {len(contents)} objects")
        for obj in contents:
            yield obj

        if not resp.get("IsTruncated"):
            break
        continuation_token = resp["NextContinuationToken"]


def put_file(s3, bucket: str, key: str, local_path: str, content_type: str = None):
    extra = {"ContentType": content_type} if content_type else {}
    s3.upload_file(local_path, bucket, key, ExtraArgs=extra)


def upload_original(s3, bucket: str, file_path: str, uuid: str, content_type: str = None) -> str:
    """Upload a local file as the original of video `uuid`; returns its key."""
    key = backup_key_for(file_path, uuid)
    content_type = content_type or mimetypes.guess_type(file_path)[0]
    size = os.path.getsize(file_path)
    logger.info(f"📤 Uploading original: {file_path} -> s3://{bucket}/{key} ({size:,} bytes)")
    put_file(s3, bucket, key, file_path, content_type)
    logger.info(f"✅ Uploaded original to s3://{bucket}/{key}")
    return key
