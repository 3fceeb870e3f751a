from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, api_view, current_role, json_body, ok
from ..container import Container

_USER_FIELDS = (
    "username",
    "password",
    "full_name",
    "photo_url",
    "role",
    "job_title",
    "required_uniform",
    "assigned_store_ids",
)


def _user_fields(data: dict) -> dict:
    fields = {k: data.get(k) for k in _USER_FIELDS if k in data}
    for key in ("username", "password", "full_name", "photo_url", "role"):
        fields.setdefault(key, "")
    return fields


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    @api_view
    def admin_users():
        users = container.user_service.list_users()
        return ok(users=[u.public_dict() for u in users])

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_user_create")
    @admin_required
    @api_view
    def admin_user_create():
        user = container.user_service.create_user(current_role=current_role(), **_user_fields(json_body()))
        return ok(user=user.public_dict(), message="Usuario creado correctamente.")

    @app.route("/api/admin/users/<username>", methods=["PUT"], endpoint="admin_user_update")
    @admin_required
    @api_view
    def admin_user_update(username: str):
        fields = _user_fields(json_body())
        fields.pop("username", None)
        user = container.user_service.update_user(current_role=current_role(), username=username, **fields)
        return ok(user=user.public_dict(), message="Usuario actualizado correctamente.")
