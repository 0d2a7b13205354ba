import os
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from tqdm import tqdm

from tube_tools.integrations.peertube_client import PeerTubeClient
from tube_tools.integrations.s3_client import upload_original
from tube_tools.services.fingerprint import get_file_hash
from tube_tools.services.local_state import LocalState
from tube_tools.services.metadata_service import MetadataService

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {".mp4", ".m4v", ".mov", ".mkv", ".webm", ".avi", ".wmv", ".flv", ".mpg", ".mpeg", ".ogv", ".ts"}


@dataclass
class UploadResult:
    file_path: str
    fingerprint: str
    uuid: str
    backup_key: Optional[str]
    skipped: bool = False


class UploadService:
    """Uploads local files to PeerTube and their originals to the backup bucket."""

    def __init__(self, peertube: PeerTubeClient, s3, bucket: str, channel_id: int,
                 state: LocalState, metadata_service: MetadataService = None):
        self.peertube = peertube
        self.s3 = s3
        self.bucket = bucket
        self.channel_id = channel_id
        self.state = state
        self.metadata_service = metadata_service or MetadataService()

    def upload_file(self, file_path: str, name: str = None, description: str = None,
                    with_metadata: bool = False) -> UploadResult:
        """Upload one file unless its fingerprint is already recorded as uploaded.

        Explicit name/description win over values read from the file's metadata.
        """
        fingerprint = get_file_hash(file_path)
        self.state.ensure_dirs()

        if self.state.is_uploaded(fingerprint):
            record = self.state.read_uploaded(fingerprint)
            logger.info(f"⏭️  Skipping {file_path}: already uploaded as {record.get('uuid')}")
            return UploadResult(file_path, fingerprint, record.get("uuid"), record.get("backup_key"), skipped=True)

        self.state.link_created(fingerprint, file_path)

        originally_published_at = None
        if with_metadata:
            metadata = self.metadata_service.extract(file_path)
            name = name or metadata.name
            description = description or metadata.description
            originally_published_at = metadata.originally_published_at

        uuid = self.peertube.upload_video(
            file_path,
            self.channel_id,
            name=name,
            description=description,
            originally_published_at=originally_published_at,
        )
        backup_key = upload_original(self.s3, self.bucket, file_path, uuid)
        self.state.mark_uploaded(fingerprint, uuid, backup_key, file_path)
        return UploadResult(file_path, fingerprint, uuid, backup_key)

    def upload_dir(self, dir_path: str, with_metadata: bool = False,
                   progress: Callable = tqdm) -> List[UploadResult]:
        """Upload every video file directly inside `dir_path`, one at a time.

        The first failure aborts the whole directory.
        """
        files = list_video_files(dir_path)
        logger.info(f"Found {len(files)} video files in {dir_path}")

        results = []
        for file_path in progress(files, desc="📤 Uploading", unit="video"):
            results.append(self.upload_file(file_path, with_metadata=with_metadata))
        return results


def list_video_files(dir_path: str) -> List[str]:
    files = []
    for entry in sorted(os.listdir(dir_path)):
        path = os.path.join(dir_path, entry)
        if os.path.isfile(path) and os.path.splitext(entry)[1].lower() in VIDEO_EXTENSIONS:
            files.append(path)
    return files
