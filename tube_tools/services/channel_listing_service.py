import re
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict

from tube_tools.integrations.peertube_client import PeerTubeClient

logger = logging.getLogger(__name__)

NEWLINE_RE = re.compile(r"\r?\n")
SHORT_DESCRIPTION_LINES = 3


class ChannelListingService:
    """Renders a channel and its videos as a markdown page (e.g. a README)."""

    def __init__(self, peertube: PeerTubeClient, chunk_size: int = 10, banner_path: str = "./banner.jpg"):
        self.peertube = peertube
        self.chunk_size = chunk_size
        self.banner_path = banner_path

    @property
    def server_url(self) -> str:
        return self.peertube.base_url

    def render(self, channel: str) -> str:
        header = self.channel_header(channel)
        videos = list(self.peertube.iter_channel_videos(channel, self.chunk_size))
        logger.info(f"Rendering {len(videos)} videos from {channel}")

        # executor.map keeps catalog order
        with ThreadPoolExecutor(max_workers=self.chunk_size, thread_name_prefix="DescriptionFetch") as executor:
            sections = list(executor.map(self.video_section, videos))
        return header + "".join(sections)

    def channel_header(self, channel: str) -> str:
        info = self.peertube.get_channel(channel)
        description = NEWLINE_RE.sub("\n", info.get("description") or "")
        text = "\n".join([
            f"# [{info['displayName']}]({self.server_url}/c/{channel}/)",
            "",
            f"![]({self.banner_path})",
            "",
            self.rewrite_video_links(description),
        ])
        return text + "\n\n"

    def video_section(self, video: Dict) -> str:
        name = video["name"]
        url = video.get("url") or f"{self.server_url}/w/{video.get('shortUUID') or video['uuid']}"
        description = self.peertube.get_video_description(video["id"])
        short_description = "\n".join(NEWLINE_RE.split(description)[:SHORT_DESCRIPTION_LINES])

        text = "\n".join([
            f"## [{name}]({url})",
            "",
            f"[![{name}]({self.server_url}{video.get('thumbnailPath', '')})]({url})",
            "",
            short_description,
        ])
        return text + "\n\n"

    def rewrite_video_links(self, text: str) -> str:
        """Point links to videos on this server at their section further down the page."""
        video_link_re = re.compile(r"\[(.*?)\]\(" + re.escape(self.server_url) + r"/w/[a-zA-Z0-9]+\)")
        return video_link_re.sub(lambda m: anchor(m.group(1)), text)


def heading_slug(text: str) -> str:
    """GitHub-style anchor for a heading."""
    slug = text.strip().lower()
    slug = re.sub(r"[^\w\- ]", "", slug)
    return slug.replace(" ", "-")


def anchor(label: str) -> str:
    return f"[{label}](#{heading_slug(label)})"
