import os
import mimetypes
import logging
from datetime import datetime
from typing import Dict, Iterator, Optional
import requests

from tube_tools.errors import PeerTubeError

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_LANGUAGE = "en"
PRIVACY_PUBLIC = 1


class PeerTubeClient:
    """Thin client over the PeerTube REST API (v1)."""

    def __init__(self, base_url: str, timeout: float = 30.0, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.access_token: Optional[str] = None

    @classmethod
    def from_settings(cls, settings, session: requests.Session = None) -> "PeerTubeClient":
        return cls(settings.peertube_url, timeout=settings.HTTP_TIMEOUT, session=session)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/v1/{path.lstrip('/')}"

    def _headers(self, extra: Dict = None) -> Dict:
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if extra:
            headers.update(extra)
        return headers

    def _get_json(self, path: str, params: Dict = None):
        r = self.session.get(self._url(path), params=params, headers=self._headers(), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def authenticate(self, username: str, password: str) -> str:
        """Password-grant login through the instance's local OAuth client."""
        client = self._get_json("oauth-clients/local")

        r = self.session.post(
            self._url("users/token"),
            data={
                "client_id": client["client_id"],
                "client_secret": client["client_secret"],
                "grant_type": "password",
                "response_type": "code",
                "username": username,
                "password": password,
            },
            timeout=self.timeout,
        )
        r.raise_for_status()
        self.access_token = r.json()["access_token"]
        logger.info(f"🔐 Authenticated with {self.base_url} as {username}")
        return self.access_token

    def get_channel(self, channel: str) -> Dict:
        return self._get_json(f"video-channels/{channel}")

    def get_channel_id(self, channel: str) -> int:
        channel_id = self.get_channel(channel)["id"]
        logger.debug(f"Resolved channel {channel} to id {channel_id}")
        return channel_id

    def get_video_description(self, video_id) -> str:
        return self._get_json(f"videos/{video_id}/description").get("description") or ""

    def iter_channel_videos(self, channel: str, page_size: int = 50) -> Iterator[Dict]:
        """Yield every video of a channel, most recently published first.

        Pages are requested at increasing offsets; a page shorter than
        `page_size` is the last one. The reported total is never consulted.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        start = 0
        while True:
            page = self._get_json(
                f"video-channels/{channel}/videos",
                params={
                    "start": start,
                    "count": page_size,
                    "sort": "-publishedAt",
                    "skipCount": "true",
                },
            )
            videos = page.get("data", [])
            logger.debug(f"Channel {channel}: {len(videos)} videos at offset {start}")
            for video in videos:
                yield video

            if len(videos) < page_size:
                break
            start += len(videos)

    def upload_video(
        self,
        file_path: str,
        channel_id: int,
        name: str = None,
        description: str = None,
        originally_published_at: datetime = None,
        category_id: int = None,
        language: str = DEFAULT_LANGUAGE,
        privacy: int = PRIVACY_PUBLIC,
        wait_transcoding: bool = True,
    ) -> str:
        """Upload a video with the resumable upload API; returns the new video's UUID."""
        filename = os.path.basename(file_path)
        file_size = os.path.getsize(file_path)
        if file_size == 0:
            raise PeerTubeError(f"Refusing to upload {filename}: the file is empty")
        content_type = mimetypes.guess_type(file_path)[0] or "application/octet-stream"

        metadata = {
            "channelId": channel_id,
            "name": name or filename,
            "filename": filename,
            "language": language,
            "privacy": privacy,
            "waitTranscoding": wait_transcoding,
        }
        if description:
            metadata["description"] = description
        if category_id is not None:
            metadata["category"] = category_id
        if originally_published_at is not None:
            metadata["originallyPublishedAt"] = originally_published_at.isoformat()

        r = self.session.post(
            self._url("videos/upload-resumable"),
            headers=self._headers({
                "X-Upload-Content-Length": str(file_size),
                "X-Upload-Content-Type": content_type,
            }),
            json=metadata,
            timeout=self.timeout,
        )
        r.raise_for_status()
        upload_url = self._absolute(r.headers["Location"])
        logger.info(f"📤 Uploading {filename} to PeerTube ({file_size:,} bytes)")

        offset = 0
        with open(file_path, "rb") as f:
            while offset < file_size:
                chunk = f.read(UPLOAD_CHUNK_BYTES)
                end = offset + len(chunk) - 1
                r = self.session.put(
                    upload_url,
                    headers=self._headers({
                        "Content-Type": "application/octet-stream",
                        "Content-Range": f"bytes {offset}-{end}/{file_size}",
                    }),
                    data=chunk,
                    timeout=self.timeout,
                )
                if r.status_code == 308:
                    offset = end + 1
                    logger.debug(f"Uploaded {offset:,}/{file_size:,} bytes of {filename}")
                    continue
                r.raise_for_status()
                uuid = (r.json().get("video") or {}).get("uuid")
                if not uuid:
                    raise PeerTubeError(f"Upload of {filename} finished without a video UUID")
                logger.info(f"✅ Uploaded {filename} to PeerTube: {uuid}")
                return uuid

        raise PeerTubeError(f"Sent all {file_size:,} bytes of {filename} but the upload was not completed")

    def _absolute(self, location: str) -> str:
        if location.startswith("//"):
            return "https:" + location
        if location.startswith("/"):
            return self.base_url + location
        return location


def connect(settings, session: requests.Session = None) -> PeerTubeClient:
    """Authenticated client for the configured instance."""
    client = PeerTubeClient.from_settings(settings, session=session)
    client.authenticate(settings.PEERTUBE_USERNAME, settings.PEERTUBE_PASSWORD)
    return client
