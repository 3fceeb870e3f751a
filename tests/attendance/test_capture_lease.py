import pytest

from store_attendance.attendance.capture import CAMERA_ERROR_MESSAGE, SessionCameraLease
from store_attendance.core.exceptions import CaptureUnavailableError


def test_acquire_and_release():
    lease = SessionCameraLease()
    handle = lease.acquire()
    assert lease.is_open

    handle.release()
    handle.release()
    assert handle.released
    assert not lease.is_open


def test_second_acquire_replaces_the_first_handle():
    lease = SessionCameraLease()
    first = lease.acquire()
    second = lease.acquire()
    assert first.released
    assert not second.released
    assert lease.is_open

    first.release()
    assert lease.is_open


def test_denied_lease_raises():
    lease = SessionCameraLease()
    lease.denied = True
    with pytest.raises(CaptureUnavailableError) as exc:
        lease.acquire()
    assert str(exc.value) == CAMERA_ERROR_MESSAGE
