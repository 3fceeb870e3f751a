from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for routing after login."""

    AUDITOR = "auditor"
    MANAGER = "manager"
    ADMIN = "admin"


class ClockType(str, Enum):
    """Attendance event type as stored in ``time_logs.type``."""

    INGRESO = "INGRESO"
    EGRESO = "EGRESO"


class LocationStatus(str, Enum):
    OK = "OK"
    FAR = "FAR"
    ERROR = "ERROR"


class GeoErrorCode(str, Enum):
    """Reason a GPS fix could not be obtained on the device."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    UNSUPPORTED = "UNSUPPORTED"
    UNKNOWN = "UNKNOWN"


class OutcomeStatus(str, Enum):
    SUCCESS = "SUCCESS"
    DEGRADED = "DEGRADED"
    FAILED = "FAILED"


class FlowStep(str, Enum):
    """Steps of the attendance flow, from login to the terminal screens."""

    CREDENTIALS = "credentials"
    STORE_SELECTION = "store_selection"
    CHECKING_LOCATION = "checking_location"
    CLOCK_SELECTION = "clock_selection"
    CAMERA = "camera"
    VERIFYING = "verifying"
    UPLOADING = "uploading"
    VERIFICATION_FAILED = "verification_failed"
    SUCCESS_ENTRY = "success_entry"
    SUCCESS_EXIT = "success_exit"
    AUTHENTICATED = "authenticated"


class RequestKind(str, Enum):
    """External waits the flow can have outstanding."""

    GEOLOCATION = "geolocation"
    VERIFICATION = "verification"
    UPLOAD = "upload"
