from __future__ import annotations

from flask import Flask, session

from ..common.web import admin_required, api_view, current_role, fail, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError
from .model import AuditReport


def register(app: Flask, container: Container) -> None:
    def current_user():
        user = container.users_repo.get_by_username(session["username"])
        if user is None:
            raise AuthenticationError("Debe iniciar sesión.")
        return user

    def draft(data: dict) -> dict:
        answers = data.get("answers") or {}
        photos = data.get("photos") or {}
        if not isinstance(answers, dict) or not isinstance(photos, dict):
            raise ValidationError("Formato de auditoría inválido.")
        return {
            "store_id": str(data.get("store_id", "")),
            "answers": {str(k): str(v) for k, v in answers.items() if v},
            "photos": {str(k): str(v) for k, v in photos.items() if v},
        }

    @app.route("/api/audits/questions", methods=["GET"], endpoint="audit_questions")
    @login_required
    @api_view
    def audit_questions():
        user = current_user()
        stores = container.store_service.stores_for(user.assigned_store_ids)
        return ok(
            questions=[q.to_dict() for q in container.audit_service.questions()],
            stores=[s.to_dict() for s in stores],
        )

    @app.route("/api/audits/analyze", methods=["POST"], endpoint="audit_analyze")
    @login_required
    @api_view
    def audit_analyze():
        report = container.audit_service.analyze(current_user(), **draft(json_body()))
        return ok(report=report.to_dict())

    @app.route("/api/audits", methods=["POST"], endpoint="audit_save")
    @login_required
    @api_view
    def audit_save():
        data = json_body()
        try:
            report = AuditReport.from_payload(data.get("report") or {})
        except (TypeError, ValueError):
            raise ValidationError("Debe generar el reporte antes de guardar.")

        saved = container.audit_service.save(current_user(), report=report, **draft(data))
        if not saved:
            return fail("Hubo un error guardando la auditoría. Intente nuevamente.", 502)
        return ok(saved=True, message="Auditoría guardada exitosamente.")

    @app.route("/api/admin/audits", methods=["GET"], endpoint="admin_audits")
    @admin_required
    @api_view
    def admin_audits():
        audits = container.audit_service.list_audits(current_role=current_role())
        return ok(audits=[a.to_dict() for a in audits])
