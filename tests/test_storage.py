import pytest

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError
from app.services.storage_service import StorageService
from utils.constants import BUCKET_SHOP_IMAGES, BUCKET_VOICE_RECORDINGS


def test_public_url_maps_back_to_bucket_and_path():
    storage = StorageService()
    url = storage.public_url(BUCKET_SHOP_IMAGES, "shop-1/logo-1.png")

    assert url == f"{settings.files_base_url}/shop-images/shop-1/logo-1.png"
    assert storage.parse_public_url(url) == (BUCKET_SHOP_IMAGES, "shop-1/logo-1.png")


def test_parse_public_url_decodes_path():
    storage = StorageService()
    url = f"{settings.files_base_url}/{BUCKET_VOICE_RECORDINGS}/my%20clip.webm"
    assert storage.parse_public_url(url) == (BUCKET_VOICE_RECORDINGS, "my clip.webm")


@pytest.mark.parametrize("url", [
    "https://cdn.example.com/api/v1/files/shop-images/a.png",
    f"{settings.files_base_url}/not-a-bucket/a.png",
    f"{settings.files_base_url}/shop-images/",
])
def test_parse_public_url_rejects_foreign_urls(url):
    assert StorageService().parse_public_url(url) is None


def test_unknown_bucket():
    with pytest.raises(ResourceNotFoundError):
        StorageService()._bucket("not-a-bucket")
