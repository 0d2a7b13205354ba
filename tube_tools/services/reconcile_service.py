import logging
from typing import Set

from tube_tools.integrations.peertube_client import PeerTubeClient
from tube_tools.integrations.s3_client import ORIGINALS_PREFIX, iter_backup_objects, uuid_from_backup_key

logger = logging.getLogger(__name__)


class ReconcileService:
    """Finds PeerTube videos whose original is missing from the backup bucket."""

    def __init__(self, peertube: PeerTubeClient, s3, bucket: str):
        self.peertube = peertube
        self.s3 = s3
        self.bucket = bucket

    def peertube_uuids(self, channel: str, page_size: int = 50) -> Set[str]:
        uuids = {video["uuid"] for video in self.peertube.iter_channel_videos(channel, page_size)}
        logger.info(f"Channel {channel} has {len(uuids)} videos")
        return uuids

    def backup_uuids(self, page_size: int = 1000) -> Set[str]:
        # A malformed key aborts the whole run rather than being skipped
        uuids = {
            uuid_from_backup_key(obj["Key"])
            for obj in iter_backup_objects(self.s3, self.bucket, ORIGINALS_PREFIX, page_size)
        }
        logger.info(f"Bucket {self.bucket} has {len(uuids)} originals")
        return uuids

    def compute_missing_backups(self, channel: str, page_size: int = 50, backup_page_size: int = 1000) -> Set[str]:
        missing = self.peertube_uuids(channel, page_size) - self.backup_uuids(backup_page_size)
        logger.info(f"{len(missing)} videos have no original in s3://{self.bucket}/{ORIGINALS_PREFIX}/")
        return missing
