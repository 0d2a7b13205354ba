"""
Clients for the remote stores tube-tools talks to:
- peertube_client: PeerTube REST API (auth, channel catalog, uploads)
- s3_client: S3-compatible backup bucket (originals/<uuid><ext>)
"""
