from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..stores.repository import StoreRepository
from .model import UserProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: resolve credentials against the user directory."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> UserProfile:
        user = self._users.get_by_username((username or "").strip())
        # Passwords are stored as typed.
        if not user or user.password != password:
            raise AuthenticationError("Usuario o contraseña incorrectos.")
        return user


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository, stores: Optional[StoreRepository] = None):
        self._users = users
        self._stores = stores

    def list_users(self) -> Sequence[UserProfile]:
        return self._users.list_all()

    def _build_profile(
        self,
        *,
        username: str,
        password: str,
        full_name: str,
        photo_url: str,
        role: str | Role,
        job_title: str = "",
        required_uniform: Optional[str] = None,
        assigned_store_ids=None,
    ) -> UserProfile:
        if not (username and password and full_name and photo_url):
            raise ValidationError("Por favor complete todos los campos incluyendo la foto.")

        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Rol inválido")

        store_ids = [str(s).strip() for s in (assigned_store_ids or []) if str(s).strip()]
        if role != Role.ADMIN and not store_ids:
            raise ValidationError("Debe asignar al menos una sucursal al empleado.")

        if self._stores is not None:
            known = {s.id for s in self._stores.list_all()}
            unknown = [sid for sid in store_ids if sid not in known]
            if unknown:
                raise ValidationError(f"Sucursal inexistente: {', '.join(unknown)}")

        return UserProfile(
            username=require_non_empty(username, "Usuario"),
            full_name=require_non_empty(full_name, "Nombre completo"),
            password=password,
            role=role,
            job_title=(job_title or "").strip(),
            photo_url=photo_url.strip(),
            required_uniform=(required_uniform or "").strip() or None,
            assigned_store_ids=tuple(dict.fromkeys(store_ids)),
        )

    def create_user(self, *, current_role: Role, **fields) -> UserProfile:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para esta acción")

        profile = self._build_profile(**fields)
        if self._users.get_by_username(profile.username):
            raise ValidationError("El nombre de usuario ya existe.")

        self._users.create(profile)
        logger.info("user created: %s (%s)", profile.username, profile.role.value)
        return profile

    def update_user(self, *, current_role: Role, username: str, **fields) -> UserProfile:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos para esta acción")

        existing = self._users.get_by_username(username)
        if not existing:
            raise ValidationError("El usuario no existe")

        if not fields.get("password"):
            fields["password"] = existing.password
        profile = self._build_profile(username=existing.username, **fields)
        self._users.update(profile)
        logger.info("user updated: %s", profile.username)
        return profile
