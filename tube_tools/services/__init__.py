"""
Business logic for tube-tools.

- fingerprint: content hash of a file's first MiB
- local_state: created/ and uploaded/ bookkeeping under DATA_DIR
- metadata_service: ffprobe-based metadata extraction
- upload_service: PeerTube + backup upload of files and directories
- reconcile_service: PeerTube videos missing their backup original
- channel_listing_service: markdown listing of a channel
"""
