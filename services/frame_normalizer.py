"""Camera frame normalizer.

Provides a small OOP wrapper around Pillow that turns a base64-encoded
camera frame (any format Pillow can open) into a base64-encoded JPEG that
fits within `max_size`, so vision requests stay small regardless of the
client's capture resolution.

Example:
    normalizer = FrameNormalizer(max_size=(512, 512))
    jpeg_b64 = normalizer.normalize_base64(b64_input)
"""
from __future__ import annotations

import base64
import binascii
import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class FrameNormalizer:
    """Downscale and re-encode frames as JPEG.

    Args:
        max_size: Maximum width and height of the output. Defaults to (512, 512).
        quality: JPEG quality passed to Pillow.
        background: Color used to flatten frames with an alpha channel.
    """

    def __init__(
        self,
        max_size: Tuple[int, int] = (512, 512),
        quality: int = 85,
        background: Tuple[int, int, int] | None = None,
    ):
        self.max_size = max_size
        self.quality = quality
        self.background = background or (255, 255, 255)

    def normalize_base64(self, data: str | bytes) -> str:
        """Return the frame as a base64-encoded JPEG string.

        A `data:image/...;base64,` prefix, as produced by `canvas.toDataURL`,
        is accepted and stripped.

        Raises:
            ValueError: If the data is not base64 or not a supported image.
        """
        text = data.decode("utf-8", errors="strict") if isinstance(data, bytes) else data
        text = text.strip()
        if text.startswith("data:") and "," in text:
            text = text.split(",", 1)[1]

        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Image body must be base64-encoded.") from exc

        try:
            src = Image.open(io.BytesIO(raw))
            src.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Decoded bytes are not a supported image format.") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        # JPEG has no alpha; flatten against the background color
        frame = Image.new("RGB", src.size, self.background)
        frame.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        frame.save(out_io, format="JPEG", quality=self.quality, optimize=True)
        return base64.b64encode(out_io.getvalue()).decode("ascii")
