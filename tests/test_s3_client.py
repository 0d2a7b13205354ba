from unittest.mock import Mock, call

import pytest
from botocore.exceptions import ClientError

from tube_tools.errors import MalformedBackupKeyError
from tube_tools.integrations.s3_client import (
    backup_key_for,
    iter_backup_objects,
    upload_original,
    uuid_from_backup_key,
)

UUID = "9c9de5e8-0a1e-484a-b099-e80766180a6d"


class TestBackupKeys:

    @pytest.mark.parametrize("ext", [".mp4", ".webm", ".MOV", ".mkv", "", ".tar.gz", ".a-very-long-extension"])
    def test_extracts_uuid_whatever_the_extension(self, ext):
        assert uuid_from_backup_key(f"originals/{UUID}{ext}") == UUID

    def test_backup_key_keeps_extension(self):
        assert backup_key_for("/videos/holiday.MP4", UUID) == f"originals/{UUID}.MP4"
        assert backup_key_for("no_extension", UUID) == f"originals/{UUID}"

    def test_backup_key_parses_back_to_uuid(self):
        assert uuid_from_backup_key(backup_key_for("/videos/clip.webm", UUID)) == UUID

    @pytest.mark.parametrize("key", [
        f"backups/{UUID}.mp4",
        f"Originals/{UUID}.mp4",
        f"originals{UUID}.mp4",
        f"/originals/{UUID}.mp4",
        "",
    ])
    def test_key_without_prefix_fails_fast(self, key):
        with pytest.raises(MalformedBackupKeyError) as exc_info:
            uuid_from_backup_key(key)
        assert exc_info.value.key == key

    def test_truncated_key_fails(self):
        with pytest.raises(MalformedBackupKeyError):
            uuid_from_backup_key("originals/9c9de5e8-0a1e.mp4")

    def test_non_canonical_uuid_fails(self):
        with pytest.raises(MalformedBackupKeyError):
            uuid_from_backup_key("originals/not-a-uuid-but-long-enough-to-slice-36.mp4")

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            uuid_from_backup_key("somewhere/else.mp4")


class TestIterBackupObjects:

    def test_single_page(self):
        s3 = Mock()
        s3.list_objects_v2.return_value = {
            "Contents": [{"Key": "originals/a.mp4"}, {"Key": "originals/b.mp4"}],
            "IsTruncated": False,
        }

        keys = [obj["Key"] for obj in iter_backup_objects(s3, "bucket", page_size=10)]

        assert keys == ["originals/a.mp4", "originals/b.mp4"]
        s3.list_objects_v2.assert_called_once_with(Bucket="bucket", Prefix="originals", MaxKeys=10)

    def test_follows_continuation_tokens(self):
        s3 = Mock()
        s3.list_objects_v2.side_effect = [
            {"Contents": [{"Key": "originals/1"}], "IsTruncated": True, "NextContinuationToken": "t1"},
            {"Contents": [{"Key": "originals/2"}], "IsTruncated": True, "NextContinuationToken": "t2"},
            {"Contents": [{"Key": "originals/3"}], "IsTruncated": False},
        ]

        keys = [obj["Key"] for obj in iter_backup_objects(s3, "bucket", page_size=1)]

        assert keys == ["originals/1", "originals/2", "originals/3"]
        assert s3.list_objects_v2.call_args_list == [
            call(Bucket="bucket", Prefix="originals", MaxKeys=1),
            call(Bucket="bucket", Prefix="originals", MaxKeys=1, ContinuationToken="t1"),
            call(Bucket="bucket", Prefix="originals", MaxKeys=1, ContinuationToken="t2"),
        ]

    def test_empty_bucket(self):
        s3 = Mock()
        s3.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}
        assert list(iter_backup_objects(s3, "bucket")) == []

    def test_is_lazy(self):
        s3 = Mock()
        iter_backup_objects(s3, "bucket")
        s3.list_objects_v2.assert_not_called()

    def test_request_error_propagates(self):
        s3 = Mock()
        s3.list_objects_v2.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "ListObjectsV2"
        )
        with pytest.raises(ClientError):
            list(iter_backup_objects(s3, "bucket"))


class TestUploadOriginal:

    def test_uploads_under_originals_key(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"video")
        s3 = Mock()

        key = upload_original(s3, "tube-originals", str(path), UUID)

        assert key == f"originals/{UUID}.mp4"
        s3.upload_file.assert_called_once_with(
            str(path), "tube-originals", key, ExtraArgs={"ContentType": "video/mp4"}
        )

    def test_upload_error_propagates(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"video")
        s3 = Mock()
        s3.upload_file.side_effect = RuntimeError("connection reset")

        with pytest.raises(RuntimeError):
            upload_original(s3, "tube-originals", str(path), UUID)
