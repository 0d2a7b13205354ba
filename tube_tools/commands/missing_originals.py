from typing import Set

from tube_tools.config import Settings
from tube_tools.integrations import peertube_client
from tube_tools.integrations.s3_client import get_s3_from_settings
from tube_tools.services.reconcile_service import ReconcileService


class MissingOriginalsCommand:
    """List PeerTube videos that have no original in the backup bucket."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def run(self, page_size: int = None) -> Set[str]:
        service = ReconcileService(
            peertube_client.connect(self.settings),
            get_s3_from_settings(self.settings),
            self.settings.S3_BUCKET,
        )
        missing = service.compute_missing_backups(
            self.settings.PEERTUBE_CHANNEL,
            page_size=self.settings.PEERTUBE_PAGE_SIZE if page_size is None else page_size,
            backup_page_size=self.settings.S3_PAGE_SIZE,
        )

        print(f"Videos without originals ({len(missing)}):")
        for uuid in sorted(missing):
            print(uuid)
        return missing
