from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Store


class StoreRepository(Protocol):
    def get_by_id(self, store_id: str) -> Optional[Store]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Store]:
        raise NotImplementedError

    def create(self, store: Store) -> None:
        raise NotImplementedError

    def update(self, store: Store) -> bool:
        raise NotImplementedError
