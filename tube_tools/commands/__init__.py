"""
Command modules for the tube-tools CLI.

This package contains thin CLI wrappers around the services:
- file_info: fingerprint and metadata of a local file
- upload: upload files, directories and backup originals
- missing_originals: PeerTube videos without a backup original
- channel_readme: markdown listing of a channel
"""
