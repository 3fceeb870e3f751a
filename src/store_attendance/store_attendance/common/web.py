"""JSON helpers shared by the controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AnalysisError,
    AuthenticationError,
    AuthorizationError,
    CaptureUnavailableError,
    DomainError,
    FlowError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Error interno del sistema. Intente nuevamente."

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (FlowError, 409),
    (CaptureUnavailableError, 409),
    (ValidationError, 400),
    (AnalysisError, 502),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(**payload):
    return jsonify({"success": True, **payload}), 200


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def api_view(view):
    """Translate domain errors to JSON responses; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return fail(str(e), status_for(e))
        except Exception:
            logger.exception("unhandled error in %s", request.path)
            return fail(GENERIC_ERROR_MESSAGE, 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "username" not in session:
            return fail("Debe iniciar sesión.", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "username" not in session:
            return fail("Debe iniciar sesión.", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("No tiene permisos para esta acción", 403)
        return view(*args, **kwargs)

    return wrapper


def current_role() -> Role:
    return Role(session["role"])
