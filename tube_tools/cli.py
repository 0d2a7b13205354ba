import sys
import logging
import argparse

from tube_tools import __version__
from tube_tools.config import load_settings
from tube_tools.errors import ConfigError
from tube_tools.commands.channel_readme import ChannelReadmeCommand
from tube_tools.commands.file_info import HashCommand, MetadataCommand
from tube_tools.commands.missing_originals import MissingOriginalsCommand
from tube_tools.commands.upload import UploadCommand

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIG = 2
MAX_PAGE_SIZE = 100


def page_size_arg(value: str) -> int:
    """argparse type: an integer PeerTube will honour as a page size."""
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise argparse.ArgumentTypeError(f"must be between 1 and {MAX_PAGE_SIZE}, got {size}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tube-tools",
        description="Command-line tools to manage a PeerTube channel and its S3 originals",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("upload", help="Upload a video to PeerTube and its original to the backup bucket")
    p.add_argument("path", help="Path to the video file")
    p.add_argument("--name", help="Name of the video (default: file name or metadata title)")
    p.add_argument("--description", help="Description for the video")
    p.add_argument("--with-metadata", action="store_true",
                   help="Fill name, description and original publication date from the file's metadata")

    p = sub.add_parser("upload-dir", help="Upload every video in a directory, one at a time")
    p.add_argument("path", help="Path to the directory")
    p.add_argument("--with-metadata", action="store_true",
                   help="Fill name, description and original publication date from each file's metadata")

    p = sub.add_parser("backup", help="Upload the original of an existing PeerTube video")
    p.add_argument("path", help="Path to the video file")
    p.add_argument("uuid", help="UUID of the PeerTube video")

    p = sub.add_parser("missing-originals", help="List PeerTube videos without an original in the backup bucket")
    p.add_argument("--page-size", type=page_size_arg, default=None, help="PeerTube page size (default: PEERTUBE_PAGE_SIZE)")

    p = sub.add_parser("channel-readme", help="Render a channel's videos as markdown")
    p.add_argument("--channel", help="Channel handle (default: PEERTUBE_CHANNEL)")
    p.add_argument("--chunk-size", type=page_size_arg, default=10, help="Page size and number of parallel description fetches")
    p.add_argument("--output", "-o", help="Write to this file instead of stdout")

    p = sub.add_parser("metadata", help="Read metadata in a video file")
    p.add_argument("path", help="Path to the video file")

    p = sub.add_parser("hash", help="Get hash of the initial 1 MiB of a file")
    p.add_argument("path", help="Path to the file")

    return parser


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    for noisy in ("botocore", "boto3", "s3transfer", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def run(args: argparse.Namespace):
    if args.command == "hash":
        return HashCommand().run(args.path)
    if args.command == "metadata":
        return MetadataCommand().run(args.path)

    settings = load_settings()
    if args.command == "upload":
        return UploadCommand(settings).run_file(args.path, name=args.name, description=args.description,
                                                with_metadata=args.with_metadata)
    if args.command == "upload-dir":
        return UploadCommand(settings).run_dir(args.path, with_metadata=args.with_metadata)
    if args.command == "backup":
        return UploadCommand(settings).run_backup(args.path, args.uuid)
    if args.command == "missing-originals":
        return MissingOriginalsCommand(settings).run(page_size=args.page_size)
    if args.command == "channel-readme":
        return ChannelReadmeCommand(settings).run(args.channel, chunk_size=args.chunk_size, output=args.output)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        run(args)
    except ConfigError as e:
        for problem in e.problems:
            logger.error(f"❌ {problem}")
        sys.exit(EXIT_CONFIG)
    except Exception as e:
        logger.error(f"💀 {args.command} failed: {e}", exc_info=args.verbose)
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
