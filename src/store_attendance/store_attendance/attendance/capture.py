"""Camera lease.

The browser owns the actual media stream; the server only tracks whether the
flow currently holds the device, so the client knows when to stop the stream.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..core.exceptions import CaptureUnavailableError

logger = logging.getLogger(__name__)

CAMERA_ERROR_MESSAGE = "No se pudo acceder a la cámara. Por favor verifique los permisos."


class CaptureHandle(Protocol):
    def release(self) -> None:
        """Release the device. Calling it twice is harmless."""
        raise NotImplementedError


class CaptureDevice(Protocol):
    def acquire(self) -> CaptureHandle:
        """Acquire the device or raise ``CaptureUnavailableError``."""
        raise NotImplementedError


class SessionCameraHandle:
    def __init__(self, lease: "SessionCameraLease"):
        self._lease = lease
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._lease._on_release(self)


class SessionCameraLease:
    """One device per session. ``denied`` mirrors a refused browser permission."""

    def __init__(self):
        self._current: SessionCameraHandle | None = None
        self.denied = False

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def acquire(self) -> SessionCameraHandle:
        if self.denied:
            raise CaptureUnavailableError(CAMERA_ERROR_MESSAGE)
        if self._current is not None:
            logger.debug("camera still held, releasing previous handle")
            self._current.release()
        self._current = SessionCameraHandle(self)
        return self._current

    def _on_release(self, handle: SessionCameraHandle) -> None:
        if self._current is handle:
            self._current = None
