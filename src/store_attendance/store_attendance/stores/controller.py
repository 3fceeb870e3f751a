from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, api_view, current_role, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/stores", methods=["GET"], endpoint="admin_stores")
    @admin_required
    @api_view
    def admin_stores():
        return ok(stores=[s.to_dict() for s in container.store_service.list_stores()])

    @app.route("/api/admin/stores", methods=["POST"], endpoint="admin_store_create")
    @admin_required
    @api_view
    def admin_store_create():
        data = json_body()
        store = container.store_service.create_store(
            current_role=current_role(),
            name=data.get("name"),
            address=data.get("address"),
            lat=data.get("lat"),
            lng=data.get("lng"),
        )
        return ok(store=store.to_dict(), message="Sucursal creada correctamente.")

    @app.route("/api/admin/stores/<store_id>", methods=["PUT"], endpoint="admin_store_update")
    @admin_required
    @api_view
    def admin_store_update(store_id: str):
        data = json_body()
        store = container.store_service.update_store(
            current_role=current_role(),
            store_id=store_id,
            name=data.get("name"),
            address=data.get("address"),
            lat=data.get("lat"),
            lng=data.get("lng"),
        )
        return ok(store=store.to_dict(), message="Sucursal actualizada correctamente.")
