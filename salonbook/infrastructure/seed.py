"""
Load providers and services for local development from a JSON file.

Expected shape:
{
  "stylists": {"<userId>": {"days": ["Monday"], "timeSlots": [{"start": "09:00", "end": "17:00"}]}},
  "salons": {"<salonId>": [{"day": 0, "start": "09:00", "end": "19:00"}]},
  "services": [{"id": "cut", "name": "Haircut", "duration": 60, "price": 35, "providerId": "<id>"}]
}
"""

from __future__ import annotations

import json
from pathlib import Path

from salonbook.domain.entities.schedule import SalonHours, StylistWorkingHours, TimeWindow
from salonbook.domain.entities.service_catalog import ServiceEntry
from salonbook.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from salonbook.infrastructure.directory.memory_directory import MemoryProviderDirectory


def load_seed(path: str | Path, directory: MemoryProviderDirectory, catalog: ServiceCatalogStore) -> None:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    for user_id, hours in (data.get("stylists") or {}).items():
        directory.set_stylist_schedule(
            user_id,
            StylistWorkingHours(
                days=list(hours.get("days") or []),
                time_slots=[TimeWindow(start=s["start"], end=s["end"]) for s in hours.get("timeSlots") or []],
            ),
        )

    for salon_id, hours in (data.get("salons") or {}).items():
        directory.set_salon_hours(
            salon_id,
            [SalonHours(day=int(h["day"]), start=h["start"], end=h["end"]) for h in hours],
        )

    for service in data.get("services") or []:
        catalog.add(
            ServiceEntry(
                service_id=str(service["id"]),
                name=str(service.get("name") or service["id"]),
                duration_minutes=int(service.get("duration") or 60),
                provider_id=service.get("providerId"),
                price=service.get("price"),
                category=service.get("category"),
            )
        )
