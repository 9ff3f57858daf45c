"""Tests for the Cloud Storage blob store."""

import asyncio
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcloud_exceptions

from cloud_adapters.firebase.storage import DOWNLOAD_TOKENS_KEY, BlobStore

URL_PREFIX = "https://firebasestorage.googleapis.com/v0/b/demo-project.appspot.com/o/"


@pytest.fixture
def blob():
    return MagicMock()


@pytest.fixture
def store(mock_bucket, blob):
    mock_bucket.blob.return_value = blob
    return BlobStore(bucket=mock_bucket)


class TestBlobStore:
    def test_upload_returns_path_and_token_url(self, store, mock_bucket, blob):
        result = asyncio.run(store.upload("avatars/ada 1.png", b"\x89PNG", "image/png"))

        mock_bucket.blob.assert_called_once_with("avatars/ada 1.png")
        blob.upload_from_string.assert_called_once_with(b"\x89PNG", content_type="image/png")
        token = blob.metadata[DOWNLOAD_TOKENS_KEY]
        assert result == {
            "path": "avatars/ada 1.png",
            "url": f"{URL_PREFIX}avatars%2Fada%201.png?alt=media&token={token}",
        }

    def test_upload_defaults_content_type_and_converts_bytearray(self, store, blob):
        asyncio.run(store.upload("data.bin", bytearray(b"abc")))

        blob.upload_from_string.assert_called_once_with(
            b"abc", content_type="application/octet-stream"
        )

    def test_get_url_uses_existing_token(self, store, blob):
        blob.metadata = {DOWNLOAD_TOKENS_KEY: "tok-1,tok-2"}

        url = asyncio.run(store.get_url("docs/a.txt"))

        blob.reload.assert_called_once_with()
        blob.patch.assert_not_called()
        assert url == f"{URL_PREFIX}docs%2Fa.txt?alt=media&token=tok-1"

    def test_get_url_attaches_token_when_missing(self, store, blob):
        blob.metadata = {"owner": "ada"}

        url = asyncio.run(store.get_url("docs/a.txt"))

        blob.patch.assert_called_once_with()
        token = blob.metadata[DOWNLOAD_TOKENS_KEY]
        assert blob.metadata["owner"] == "ada"
        assert url.endswith(f"token={token}")

    def test_get_url_missing_object_propagates(self, store, blob):
        blob.reload.side_effect = gcloud_exceptions.NotFound("No such object")

        with pytest.raises(gcloud_exceptions.NotFound):
            asyncio.run(store.get_url("missing.txt"))

    def test_delete(self, store, blob):
        assert asyncio.run(store.delete("docs/a.txt")) is True
        blob.delete.assert_called_once_with()

    def test_delete_missing_object_propagates(self, store, blob):
        blob.delete.side_effect = gcloud_exceptions.NotFound("No such object")

        with pytest.raises(gcloud_exceptions.NotFound):
            asyncio.run(store.delete("missing.txt"))
