from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import UserProfile


class UserRepository(Protocol):
    """Repository interface for the user directory.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_username(self, username: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[UserProfile]:
        raise NotImplementedError

    def create(self, user: UserProfile) -> None:
        raise NotImplementedError

    def update(self, user: UserProfile) -> bool:
        raise NotImplementedError
