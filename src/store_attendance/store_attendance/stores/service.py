from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import epoch_ms, now_utc
from ..common.validators import require_float, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Store
from .repository import StoreRepository

logger = logging.getLogger(__name__)


class StoreService:
    """Use case: store directory (read for everyone, write for admins)."""

    def __init__(self, stores: StoreRepository, *, clock: Callable[[], datetime] = now_utc):
        self._stores = stores
        self._clock = clock

    def list_stores(self) -> Sequence[Store]:
        return self._stores.list_all()

    def stores_for(self, assigned_store_ids) -> list[Store]:
        """Stores a user may pick at login, in directory order."""
        allowed = set(assigned_store_ids or ())
        return [s for s in self._stores.list_all() if s.id in allowed]

    def get(self, store_id: str) -> Optional[Store]:
        return self._stores.get_by_id(store_id)

    @staticmethod
    def _validate(name, address, lat, lng) -> tuple[str, str, float, float]:
        try:
            return (
                require_non_empty(name, "Nombre"),
                require_non_empty(address, "Dirección"),
                require_float(lat, "Latitud"),
                require_float(lng, "Longitud"),
            )
        except ValidationError:
            raise ValidationError("Por favor complete todos los campos de la sucursal.")

    def create_store(self, *, current_role: Role, name, address, lat, lng) -> Store:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para esta acción")

        name, address, lat, lng = self._validate(name, address, lat, lng)
        store = Store(id=f"STORE-{epoch_ms(self._clock())}", name=name, address=address, lat=lat, lng=lng)
        self._stores.create(store)
        logger.info("store created: %s (%s)", store.id, store.name)
        return store

    def update_store(self, *, current_role: Role, store_id: str, name, address, lat, lng) -> Store:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para esta acción")

        if not self._stores.get_by_id(store_id):
            raise ValidationError("La sucursal no existe")

        name, address, lat, lng = self._validate(name, address, lat, lng)
        store = Store(id=store_id, name=name, address=address, lat=lat, lng=lng)
        self._stores.update(store)
        logger.info("store updated: %s", store.id)
        return store
