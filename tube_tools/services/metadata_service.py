import json
import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional
from dateutil import parser as dateparse

logger = logging.getLogger(__name__)

TITLE_TAGS = ("title",)
DESCRIPTION_TAGS = ("description", "comment", "synopsis")
CREATION_TAGS = ("creation_time", "date", "com.apple.quicktime.creationdate")


@dataclass
class VideoMetadata:
    name: Optional[str] = None
    description: Optional[str] = None
    originally_published_at: Optional[datetime] = None


class MetadataService:
    """Reads container metadata with ffprobe."""

    def __init__(self, ffprobe_bin: str = "ffprobe"):
        self.ffprobe_bin = ffprobe_bin

    def probe(self, file_path: str) -> Dict:
        out = subprocess.check_output([
            self.ffprobe_bin, "-v", "quiet",
            "-print_format", "json",
            "-show_format", "-show_streams",
            file_path,
        ])
        return json.loads(out.decode("utf-8"))

    def extract(self, file_path: str) -> VideoMetadata:
        return self.from_probe(self.probe(file_path))

    @staticmethod
    def from_probe(probe: Dict) -> VideoMetadata:
        """Pick name, description and creation time out of ffprobe output."""
        tags = {k.lower(): v for k, v in (probe.get("format", {}).get("tags") or {}).items()}
        metadata = VideoMetadata(
            name=_first_tag(tags, TITLE_TAGS),
            description=_first_tag(tags, DESCRIPTION_TAGS),
        )

        created = _first_tag(tags, CREATION_TAGS)
        if created:
            try:
                dt = dateparse.isoparse(created)
            except ValueError:
                logger.warning(f"Ignoring unparseable creation time {created!r}")
            else:
                # Naive container timestamps are UTC
                metadata.originally_published_at = dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
        return metadata


def _first_tag(tags: Dict, names) -> Optional[str]:
    for name in names:
        value = tags.get(name)
        if value and str(value).strip():
            return str(value).strip()
    return None
