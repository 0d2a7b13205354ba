import logging

from tube_tools.config import Settings
from tube_tools.integrations.peertube_client import PeerTubeClient
from tube_tools.services.channel_listing_service import ChannelListingService

logger = logging.getLogger(__name__)


class ChannelReadmeCommand:
    """Render a channel's public videos as markdown."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def run(self, channel: str = None, chunk_size: int = 10, output: str = None) -> str:
        channel = channel or self.settings.PEERTUBE_CHANNEL
        peertube = PeerTubeClient.from_settings(self.settings)
        text = ChannelListingService(peertube, chunk_size=chunk_size).render(channel)

        if output:
            with open(output, "w", encoding="utf-8") as f:
                f.write(text)
            logger.info(f"Wrote {channel} listing to {output}")
        else:
            print(text, end="")
        return text
