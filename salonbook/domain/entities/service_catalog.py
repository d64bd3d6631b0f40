from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceEntry:
    service_id: str
    name: str
    duration_minutes: int
    provider_id: str | None = None
    price: float | None = None
    category: str | None = None
