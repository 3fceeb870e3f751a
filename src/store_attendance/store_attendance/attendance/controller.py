from __future__ import annotations

from flask import Flask, request, session

from ..common.validators import require_float
from ..common.web import admin_required, api_view, current_role, json_body, ok
from ..container import Container
from ..core.constants import GEO_HIGH_ACCURACY, GEO_MAXIMUM_AGE_MS, GEO_TIMEOUT_MS
from ..core.enums import ClockType, FlowStep
from ..core.exceptions import FlowError, ValidationError
from ..core.outcome import Outcome
from ..geo.distance import parse_geo_error
from ..geo.model import GeoPosition
from .flow import AttendanceFlow, PendingRequest, credentials_snapshot


def register(app: Flask, container: Container) -> None:
    registry = container.flows

    def current_flow() -> AttendanceFlow:
        flow = registry.get(session.get("flow_id"))
        if flow is None:
            raise FlowError("La sesión de fichada expiró. Inicie sesión nuevamente.")
        return flow

    def sync_session(flow: AttendanceFlow) -> None:
        if flow.step == FlowStep.AUTHENTICATED and flow.user is not None:
            session["username"] = flow.user.username
            session["role"] = flow.user.role.value
        elif flow.step == FlowStep.CREDENTIALS:
            session.pop("username", None)
            session.pop("role", None)

    def state(flow: AttendanceFlow, **extra):
        sync_session(flow)
        return ok(state=flow.snapshot(), **extra)

    @app.route("/api/attendance/login", methods=["POST"], endpoint="attendance_login")
    @api_view
    def attendance_login():
        data = json_body()
        flow_id, flow = registry.get_or_create(session.get("flow_id"))
        session["flow_id"] = flow_id
        if flow.step != FlowStep.CREDENTIALS:
            flow.reset()

        flow.submit_credentials(data.get("username", ""), data.get("password", ""))
        return state(flow)

    @app.route("/api/attendance/state", methods=["GET"], endpoint="attendance_state")
    @api_view
    def attendance_state():
        flow = registry.get(session.get("flow_id"))
        if flow is None:
            session.pop("flow_id", None)
            session.pop("username", None)
            session.pop("role", None)
            return ok(state=credentials_snapshot())
        return state(flow)

    @app.route("/api/attendance/store", methods=["POST"], endpoint="attendance_store")
    @api_view
    def attendance_store():
        flow = current_flow()
        ticket = flow.select_store(str(json_body().get("store_id", "")))
        return state(
            flow,
            ticket=ticket.to_dict(),
            geolocation={
                "enable_high_accuracy": GEO_HIGH_ACCURACY,
                "timeout_ms": GEO_TIMEOUT_MS,
                "maximum_age_ms": GEO_MAXIMUM_AGE_MS,
            },
        )

    @app.route("/api/attendance/location", methods=["POST"], endpoint="attendance_location")
    @api_view
    def attendance_location():
        flow = current_flow()
        data = json_body()
        ticket = PendingRequest.from_dict(data.get("ticket") or {})

        if data.get("error_code") is not None:
            outcome = Outcome.failed(parse_geo_error(str(data["error_code"])).value)
        else:
            position = GeoPosition(
                lat=require_float(data.get("lat"), "Latitud"),
                lng=require_float(data.get("lng"), "Longitud"),
            )
            outcome = Outcome.success(position)

        applied = flow.complete_location(ticket, outcome)
        return state(flow, applied=applied)

    @app.route("/api/attendance/action", methods=["POST"], endpoint="attendance_action")
    @api_view
    def attendance_action():
        flow = current_flow()
        try:
            action = ClockType(str(json_body().get("type", "")).upper())
        except ValueError:
            raise ValidationError("Tipo de fichada inválido.")
        flow.select_action(action)
        return state(flow)

    @app.route("/api/attendance/camera", methods=["POST"], endpoint="attendance_camera")
    @api_view
    def attendance_camera():
        """The client reports whether its stream opened; a failure releases the lease."""
        flow = current_flow()
        data = json_body()
        if data.get("available", True):
            flow.reopen_camera()
        else:
            flow.camera_failed(data.get("message"))
        return state(flow)

    @app.route("/api/attendance/capture", methods=["POST"], endpoint="attendance_capture")
    @api_view
    def attendance_capture():
        flow = current_flow()
        flow.capture_and_verify(str(json_body().get("image", "")))
        return state(flow)

    @app.route("/api/attendance/retry", methods=["POST"], endpoint="attendance_retry")
    @api_view
    def attendance_retry():
        flow = current_flow()
        flow.retry()
        return state(flow)

    @app.route("/api/attendance/force", methods=["POST"], endpoint="attendance_force")
    @api_view
    def attendance_force():
        flow = current_flow()
        flow.force_accept()
        return state(flow)

    @app.route("/api/attendance/cancel", methods=["POST"], endpoint="attendance_cancel")
    @api_view
    def attendance_cancel():
        flow = current_flow()
        flow.cancel()
        return state(flow)

    @app.route("/api/attendance/back", methods=["POST"], endpoint="attendance_back")
    @api_view
    def attendance_back():
        flow = current_flow()
        flow.back()
        return state(flow)

    @app.route("/api/attendance/finish", methods=["POST"], endpoint="attendance_finish")
    @api_view
    def attendance_finish():
        flow = current_flow()
        flow.finish()
        return state(flow)

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    @api_view
    def logout():
        registry.discard(session.get("flow_id"))
        session.clear()
        return ok()

    @app.route("/api/admin/logs", methods=["GET"], endpoint="admin_logs")
    @admin_required
    @api_view
    def admin_logs():
        incidents_only = request.args.get("incidents", "").lower() in {"1", "true", "yes"}
        logs = container.attendance_log_service.list_logs(
            current_role=current_role(), incidents_only=incidents_only
        )
        return ok(logs=[log.to_dict() for log in logs])
