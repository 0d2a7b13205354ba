import os
import json
import logging
from datetime import datetime, timezone
from typing import Dict

logger = logging.getLogger(__name__)

CREATED_DIRNAME = "created"
UPLOADED_DIRNAME = "uploaded"


class LocalState:
    """Bookkeeping under the data directory.

    created/<fingerprint><ext>  symlink to the file that was uploaded
    uploaded/<fingerprint>      JSON sentinel recording the PeerTube UUID
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self.created_dir = os.path.join(data_dir, CREATED_DIRNAME)
        self.uploaded_dir = os.path.join(data_dir, UPLOADED_DIRNAME)

    def ensure_dirs(self):
        os.makedirs(self.created_dir, exist_ok=True)
        os.makedirs(self.uploaded_dir, exist_ok=True)

    def created_path(self, fingerprint: str, file_path: str) -> str:
        ext = os.path.splitext(file_path)[1]
        return os.path.join(self.created_dir, f"{fingerprint}{ext}")

    def uploaded_path(self, fingerprint: str) -> str:
        return os.path.join(self.uploaded_dir, fingerprint)

    def link_created(self, fingerprint: str, file_path: str) -> str:
        """Symlink created/<fingerprint><ext> to the absolute path of `file_path`."""
        link_path = self.created_path(fingerprint, file_path)
        target = os.path.realpath(file_path)
        if os.path.islink(link_path):
            if os.readlink(link_path) != target:
                logger.warning(f"{link_path} already points to {os.readlink(link_path)}, keeping it")
            return link_path
        os.symlink(target, link_path)
        logger.debug(f"Linked {link_path} -> {target}")
        return link_path

    def is_uploaded(self, fingerprint: str) -> bool:
        return os.path.exists(self.uploaded_path(fingerprint))

    def read_uploaded(self, fingerprint: str) -> Dict:
        with open(self.uploaded_path(fingerprint), "r") as f:
            return json.load(f)

    def mark_uploaded(self, fingerprint: str, uuid: str, backup_key: str, file_path: str) -> Dict:
        record = {
            "uuid": uuid,
            "backup_key": backup_key,
            "file_path": os.path.realpath(file_path),
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
        }
        path = self.uploaded_path(fingerprint)
        # A sentinel is either absent or complete
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump(record, f, indent=2)
        os.replace(tmp_path, path)
        logger.debug(f"Recorded upload of {fingerprint} as {uuid}")
        return record
