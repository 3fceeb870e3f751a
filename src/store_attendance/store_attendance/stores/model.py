from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Store:
    """Domain entity: a store the chain operates (coordinates in decimal degrees)."""

    id: str
    name: str
    address: str
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "address": self.address, "lat": self.lat, "lng": self.lng}
