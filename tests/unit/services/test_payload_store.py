"""
Unit tests for the image payload pipeline.
"""
import io

import pytest
from PIL import Image as PILImage

from portfolio.core.exceptions import UpstreamFailureError
from portfolio.services.payload_store import PAYLOAD_SUFFIX, PayloadStore


def _png_bytes(width: int, height: int, color=(200, 40, 40)) -> bytes:
    buffer = io.BytesIO()
    PILImage.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_store_payload_writes_bounded_webp(tmp_path):
    store = PayloadStore(tmp_path, max_width=100, max_height=150)

    payload_ref = store.store_payload(_png_bytes(400, 300))

    assert payload_ref.endswith(PAYLOAD_SUFFIX)
    path = store.resolve(payload_ref)
    assert path.exists()
    with PILImage.open(path) as stored:
        assert stored.format == "WEBP"
        assert stored.width <= 100
        assert stored.height <= 150


def test_identical_uploads_share_one_ref(tmp_path):
    store = PayloadStore(tmp_path)
    data = _png_bytes(20, 20)

    assert store.store_payload(data) == store.store_payload(data)
    assert len(list(tmp_path.iterdir())) == 1


def test_palette_image_is_converted(tmp_path):
    buffer = io.BytesIO()
    PILImage.new("P", (10, 10)).save(buffer, format="GIF")
    store = PayloadStore(tmp_path)

    assert store.store_payload(buffer.getvalue()).endswith(PAYLOAD_SUFFIX)


def test_undecodable_upload_fails_upstream(tmp_path):
    store = PayloadStore(tmp_path)

    with pytest.raises(UpstreamFailureError) as exc_info:
        store.store_payload(b"definitely not an image")

    assert exc_info.value.too_large is False
    assert list(tmp_path.iterdir()) == []


def test_empty_upload_rejected(tmp_path):
    with pytest.raises(UpstreamFailureError):
        PayloadStore(tmp_path).store_payload(b"")


def test_oversized_upload_flagged(tmp_path):
    store = PayloadStore(tmp_path, max_bytes=10)

    with pytest.raises(UpstreamFailureError) as exc_info:
        store.store_payload(_png_bytes(20, 20))

    assert exc_info.value.too_large is True


@pytest.mark.parametrize("payload_ref", ["../secret.webp", "nested/file.webp", "/etc/passwd"])
def test_resolve_rejects_refs_outside_root(tmp_path, payload_ref):
    with pytest.raises(ValueError):
        PayloadStore(tmp_path / "media").resolve(payload_ref)
