"""
Tests for thumbnail upload and retrieval.
"""

import io

import pytest

from app.errors import ForbiddenError, NotFoundError, StoreError, ValidationError
from app.services.thumbnail_service import ThumbnailService


@pytest.fixture
def thumbnails(video_store, mock_s3_client, settings):
    return ThumbnailService(video_store, mock_s3_client, settings)


class TestUploadThumbnail:
    """Tests for ThumbnailService.upload_thumbnail."""

    def test_png_upload(self, thumbnails, owned_video, mock_s3_client, video_store):
        """Test a PNG is stored under thumbnails/ with its content type."""
        record = thumbnails.upload_thumbnail(
            "user-1", owned_video.id, io.BytesIO(b"\x89PNG"), "image/png", 4
        )

        key = record.thumbnail_url
        assert key.startswith("thumbnails/")
        assert key.endswith(".png")
        assert video_store.get_video(owned_video.id).thumbnail_url == key

        _, uploaded_key, content_type = mock_s3_client.upload_fileobj.call_args.args
        assert uploaded_key == key
        assert content_type == "image/png"

    def test_keys_are_unique(self, thumbnails, owned_video):
        """Test each upload gets a fresh random key."""
        first = thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"a"), "image/jpeg", 1)
        second = thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"b"), "image/jpeg", 1)

        assert first.thumbnail_url != second.thumbnail_url

    def test_replaced_thumbnail_deleted(self, thumbnails, owned_video, mock_s3_client):
        """Test the previous thumbnail object is removed after replacement."""
        first = thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"a"), "image/jpeg", 1)
        thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"b"), "image/jpeg", 1)

        mock_s3_client.delete_object.assert_called_once_with(first.thumbnail_url)

    def test_replacement_delete_failure_is_logged(self, thumbnails, owned_video, mock_s3_client):
        """Test a failed cleanup of the old thumbnail does not fail the upload."""
        thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"a"), "image/jpeg", 1)
        mock_s3_client.delete_object.side_effect = StoreError("denied")

        record = thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"b"), "image/jpeg", 1)

        assert record.thumbnail_url

    def test_video_reference_set_mid_upload_survives(self, thumbnails, owned_video,
                                                     mock_s3_client, video_store):
        """Test a thumbnail write leaves a concurrently stored video reference alone."""
        video_key = f"landscape/{owned_video.id}.mp4"

        def upload_with_video_stored(fileobj, key, content_type):
            video_store.set_video_url(owned_video.id, video_key)
            return key

        mock_s3_client.upload_fileobj.side_effect = upload_with_video_stored

        record = thumbnails.upload_thumbnail(
            "user-1", owned_video.id, io.BytesIO(b"a"), "image/jpeg", 1
        )

        assert record.video_url == video_key
        assert video_store.get_video(owned_video.id).video_url == video_key

    def test_metadata_failure_deletes_new_object(self, thumbnails, owned_video, mock_s3_client,
                                                 video_store, mocker):
        """Test a failed metadata write removes the just-uploaded thumbnail."""
        mocker.patch.object(video_store, "set_thumbnail_url", side_effect=RuntimeError("db locked"))

        with pytest.raises(RuntimeError):
            thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"a"), "image/png", 1)

        _, uploaded_key, _ = mock_s3_client.upload_fileobj.call_args.args
        mock_s3_client.delete_object.assert_called_once_with(uploaded_key)

    @pytest.mark.parametrize("content_type", ["image/gif", "video/mp4", "text/plain"])
    def test_rejects_other_types(self, thumbnails, owned_video, mock_s3_client, content_type):
        """Test only JPEG and PNG are accepted."""
        with pytest.raises(ValidationError):
            thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"x"), content_type, 1)
        mock_s3_client.upload_fileobj.assert_not_called()

    def test_rejects_large_image(self, thumbnails, owned_video, mock_s3_client):
        """Test images over 10 MB are rejected."""
        with pytest.raises(ValidationError):
            thumbnails.upload_thumbnail(
                "user-1", owned_video.id, io.BytesIO(b"x"), "image/png", (10 << 20) + 1
            )
        mock_s3_client.upload_fileobj.assert_not_called()

    def test_non_owner(self, thumbnails, owned_video, mock_s3_client):
        """Test only the owner may set a thumbnail."""
        with pytest.raises(ForbiddenError):
            thumbnails.upload_thumbnail("user-2", owned_video.id, io.BytesIO(b"x"), "image/png", 1)
        mock_s3_client.upload_fileobj.assert_not_called()

    def test_unknown_video(self, thumbnails):
        """Test an unknown video is NotFoundError."""
        with pytest.raises(NotFoundError):
            thumbnails.upload_thumbnail("user-1", "missing", io.BytesIO(b"x"), "image/png", 1)


class TestGetThumbnailUrl:
    """Tests for ThumbnailService.get_thumbnail_url."""

    def test_signed_url(self, thumbnails, owned_video):
        """Test a stored thumbnail resolves to a presigned URL."""
        record = thumbnails.upload_thumbnail("user-1", owned_video.id, io.BytesIO(b"a"), "image/png", 1)

        url = thumbnails.get_thumbnail_url(owned_video.id)

        assert url.startswith(f"https://test-bucket.s3.amazonaws.com/{record.thumbnail_url}")

    def test_missing_thumbnail(self, thumbnails, owned_video):
        """Test a video without thumbnail is NotFoundError."""
        with pytest.raises(NotFoundError):
            thumbnails.get_thumbnail_url(owned_video.id)

    def test_missing_video(self, thumbnails):
        """Test an unknown video is NotFoundError."""
        with pytest.raises(NotFoundError):
            thumbnails.get_thumbnail_url("missing")
