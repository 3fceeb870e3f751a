"""Helpers for images exchanged as ``data:<mime>;base64,<payload>`` URLs."""

from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


@dataclass(frozen=True)
class InlineImage:
    mime_type: str
    data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)


def parse_data_url(value: Optional[str]) -> Optional[InlineImage]:
    if not value or not value.startswith("data:"):
        return None
    m = _DATA_URL_RE.match(value.strip())
    if not m:
        return None
    return InlineImage(mime_type=m.group("mime"), data=m.group("data"))


def decoded_size(value: str) -> int:
    """Size in bytes of the payload of a data URL (0 if not a data URL)."""
    image = parse_data_url(value)
    if not image:
        return 0
    try:
        return len(image.raw_bytes())
    except (binascii.Error, ValueError):
        return 0


def to_jpeg_bytes(value: str, *, quality: int = 80) -> bytes:
    """Decode a data URL and re-encode it as JPEG.

    Raises ``ValueError`` when the payload is not a readable image.
    """
    image = parse_data_url(value)
    if not image:
        raise ValueError("Formato de imagen inválido")
    try:
        raw = image.raw_bytes()
        with Image.open(io.BytesIO(raw)) as img:
            out = io.BytesIO()
            img.convert("RGB").save(out, format="JPEG", quality=quality)
            return out.getvalue()
    except (binascii.Error, UnidentifiedImageError, OSError) as exc:
        raise ValueError("Formato de imagen inválido") from exc
