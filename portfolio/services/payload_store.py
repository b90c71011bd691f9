"""
Image payload pipeline: decode, bound, re-encode to WebP, store by content hash.
"""
import hashlib
import io
from pathlib import Path
from typing import Optional

from PIL import Image as PILImage
from PIL import ImageOps, UnidentifiedImageError

from portfolio.core.config import settings
from portfolio.core.exceptions import UpstreamFailureError
from portfolio.core.logging_config import log_error, log_info

PAYLOAD_SUFFIX = ".webp"


class PayloadStore:
    """Stores processed image blobs under ``root`` and hands out opaque refs."""

    def __init__(
        self,
        root: Path,
        *,
        max_width: int = 1080,
        max_height: int = 1440,
        quality: int = 85,
        max_bytes: Optional[int] = None,
    ):
        self.root = Path(root)
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls) -> "PayloadStore":
        return cls(
            Path(settings.media_root),
            max_width=settings.image_max_width,
            max_height=settings.image_max_height,
            quality=settings.image_quality,
            max_bytes=settings.max_upload_size_bytes,
        )

    def store_payload(self, data: bytes) -> str:
        """Process ``data`` and persist it. Returns the payload ref."""
        if not data:
            raise UpstreamFailureError("Empty upload")
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise UpstreamFailureError(
                f"Upload of {len(data)} bytes exceeds limit of {self.max_bytes}",
                too_large=True,
            )

        try:
            with PILImage.open(io.BytesIO(data)) as source:
                image = ImageOps.exif_transpose(source)
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
                image.thumbnail((self.max_width, self.max_height))
                buffer = io.BytesIO()
                image.save(buffer, format="WEBP", quality=self.quality, method=6)
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            log_error(exc)
            raise UpstreamFailureError(f"Could not decode image: {exc}") from exc

        encoded = buffer.getvalue()
        payload_ref = hashlib.sha256(encoded).hexdigest() + PAYLOAD_SUFFIX
        path = self.root / payload_ref
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if not path.exists():
                path.write_bytes(encoded)
        except OSError as exc:
            log_error(exc)
            raise UpstreamFailureError(f"Could not write payload: {exc}") from exc

        log_info(f"Payload stored: {payload_ref} ({len(encoded)} bytes)")
        return payload_ref

    def resolve(self, payload_ref: str) -> Path:
        """Filesystem path for ``payload_ref``; refs may not leave the root."""
        root = self.root.resolve()
        path = (root / payload_ref).resolve()
        if path.parent != root:
            raise ValueError(f"Invalid payload reference: {payload_ref}")
        return path
