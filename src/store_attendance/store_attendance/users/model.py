from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: an employee of the store directory.

    Note: The password is kept as plain text; it is only an input gate to the
    attendance flow and is never exposed through ``public_dict``.
    """

    username: str
    full_name: str
    password: str
    role: Role
    job_title: str
    photo_url: str
    required_uniform: Optional[str] = None
    assigned_store_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def public_dict(self) -> dict:
        return {
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role.value,
            "job_title": self.job_title,
            "photo_url": self.photo_url,
            "required_uniform": self.required_uniform,
            "assigned_store_ids": list(self.assigned_store_ids),
        }
