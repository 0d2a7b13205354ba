from unittest.mock import Mock

import pytest

from tube_tools.config import Settings


def make_response(json_data=None, status_code=200, headers=None):
    """Stand-in for a requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = json_data
    return response


@pytest.fixture
def settings(tmp_path):
    return Settings(
        PEERTUBE_URL="https://tube.example.org",
        PEERTUBE_USERNAME="admin",
        PEERTUBE_PASSWORD="secret",
        PEERTUBE_CHANNEL="art_channel",
        S3_ENDPOINT="https://s3.example.org",
        S3_ACCESS_KEY="access",
        S3_SECRET_KEY="secret-key",
        S3_BUCKET="tube-originals",
        DATA_DIR=str(tmp_path / "data"),
    )
