# tests/test_storage_service.py
import asyncio

import pytest

from app.core.errors import BackendError
from app.services.storage_service import StorageService
from tests.conftest import jpeg
from tests.fake_firestore import FakeBucket


class TestFilenames:

    @pytest.mark.parametrize("original,expected", [
        ("photo.JPG", "u1_1700000000000_0.jpg"),
        ("street.view.png", "u1_1700000000000_0.png"),
        ("noextension", "u1_1700000000000_0.jpg"),
        ("trailing.", "u1_1700000000000_0.jpg"),
    ])
    def test_build_filename(self, original, expected):
        assert StorageService.build_filename("u1", 1700000000000, 0, original) == expected


class TestUpload:

    def test_no_images_is_a_noop(self):
        bucket = FakeBucket()
        assert asyncio.run(StorageService(bucket=bucket).upload_images("u1", [])) == []
        assert bucket.objects == {}

    def test_urls_keep_input_order(self):
        bucket = FakeBucket()
        service = StorageService(bucket=bucket, folder="uploads")

        urls = asyncio.run(service.upload_images("u1", [jpeg("a.jpg"), jpeg("b.jpg"), jpeg("c.jpg")]))

        assert [url.rsplit("_", 1)[-1] for url in urls] == ["0.jpg", "1.jpg", "2.jpg"]
        assert all("/uploads/u1_" in url for url in urls)
        content, content_type = next(iter(bucket.objects.values()))
        assert content_type == "image/jpeg"

    def test_failure_cleans_up_successful_uploads(self):
        bucket = FakeBucket()
        bucket.fail_on = "_0."

        with pytest.raises(BackendError):
            asyncio.run(StorageService(bucket=bucket).upload_images("u1", [jpeg("a.jpg"), jpeg("b.jpg")]))

        assert bucket.objects == {}
        assert [path.rsplit("_", 1)[-1] for path in bucket.deleted] == ["1.jpg"]


class TestDeleteImages:

    def test_removes_objects_behind_public_urls(self):
        bucket = FakeBucket()
        service = StorageService(bucket=bucket)
        urls = asyncio.run(service.upload_images("u1", [jpeg("a.jpg"), jpeg("b.jpg")]))

        service.delete_images(urls + ["https://elsewhere.in/avatar.png"])

        assert bucket.objects == {}
        assert sorted(bucket.deleted) == sorted(
            url.split("/janta-test/", 1)[1] for url in urls
        )
