"""Evidence-photo bucket.

Objects are keyed ``{identifier}_{epoch_ms}.jpg`` and resolved through a public
base URL (served by the ``/evidence/<name>`` route).
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol

from werkzeug.utils import secure_filename

from ..common.datetime_utils import epoch_ms, now_utc
from ..common.images import to_jpeg_bytes

logger = logging.getLogger(__name__)


class EvidenceStorage(Protocol):
    def upload(self, image_data_url: str, identifier: str) -> Optional[str]:
        """Store the image and return its public URL, or ``None`` on failure."""
        raise NotImplementedError


class LocalEvidenceStorage(EvidenceStorage):
    def __init__(self, root_dir: str | Path, public_base_url: str, *, clock: Callable[[], datetime] = now_utc):
        self._root = Path(root_dir)
        self._public_base_url = public_base_url.rstrip("/")
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def object_key(self, identifier: str) -> str:
        safe = secure_filename(identifier) or "evidence"
        return f"{safe}_{epoch_ms(self._clock())}.jpg"

    def upload(self, image_data_url: str, identifier: str) -> Optional[str]:
        try:
            payload = to_jpeg_bytes(image_data_url)
            key = self.object_key(identifier)
            self._root.mkdir(parents=True, exist_ok=True)
            target = self._root / key
            if target.exists():
                logger.error("evidence object already exists: %s", key)
                return None
            target.write_bytes(payload)
        except (OSError, ValueError) as exc:
            logger.warning("evidence upload failed for %s: %s", identifier, exc)
            return None
        return f"{self._public_base_url}/{key}"
