from typing import List

from tube_tools.config import Settings
from tube_tools.integrations import peertube_client
from tube_tools.integrations.s3_client import get_s3_from_settings, upload_original
from tube_tools.services.local_state import LocalState
from tube_tools.services.upload_service import UploadResult, UploadService


class UploadCommand:
    """Upload local videos to PeerTube and keep their originals in the backup bucket."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _service(self) -> UploadService:
        peertube = peertube_client.connect(self.settings)
        channel_id = peertube.get_channel_id(self.settings.PEERTUBE_CHANNEL)
        return UploadService(
            peertube,
            get_s3_from_settings(self.settings),
            self.settings.S3_BUCKET,
            channel_id,
            LocalState(self.settings.data_dir),
        )

    def run_file(self, file_path: str, name: str = None, description: str = None,
                 with_metadata: bool = False) -> UploadResult:
        result = self._service().upload_file(file_path, name=name, description=description,
                                             with_metadata=with_metadata)
        if result.skipped:
            print(f"⏭️  Already uploaded: {result.uuid}")
        else:
            print(f"✅ Uploaded: {result.uuid}")
            print(f"🗂️  Original: s3://{self.settings.S3_BUCKET}/{result.backup_key}")
        print(f"{self.settings.peertube_url}/w/{result.uuid}")
        return result

    def run_dir(self, dir_path: str, with_metadata: bool = False) -> List[UploadResult]:
        results = self._service().upload_dir(dir_path, with_metadata=with_metadata)

        uploaded = [r for r in results if not r.skipped]
        print(f"\n📊 Upload Summary:")
        print(f"{'='*50}")
        print(f"✅ Uploaded: {len(uploaded)}")
        print(f"⏭️  Already uploaded: {len(results) - len(uploaded)}")
        for r in uploaded:
            print(f"  {r.uuid}  {r.file_path}")
        return results

    def run_backup(self, file_path: str, uuid: str) -> str:
        """Upload the original of an existing PeerTube video."""
        s3 = get_s3_from_settings(self.settings)
        key = upload_original(s3, self.settings.S3_BUCKET, file_path, uuid)
        print(key)
        return key
