from __future__ import annotations

from salonbook.application.ports.provider_directory import ProviderDirectoryPort
from salonbook.domain.entities.schedule import SalonHours, StylistWorkingHours


class MemoryProviderDirectory(ProviderDirectoryPort):
    def __init__(
        self,
        stylists: dict[str, StylistWorkingHours] | None = None,
        salons: dict[str, list[SalonHours]] | None = None,
    ) -> None:
        self._stylists = dict(stylists or {})
        self._salons = dict(salons or {})

    def set_stylist_schedule(self, user_id: str, hours: StylistWorkingHours) -> None:
        self._stylists[user_id] = hours

    def set_salon_hours(self, salon_id: str, hours: list[SalonHours]) -> None:
        self._salons[salon_id] = list(hours)

    def get_stylist_schedule(self, user_id: str) -> StylistWorkingHours | None:
        return self._stylists.get(user_id)

    def get_salon_hours(self, salon_id: str) -> list[SalonHours] | None:
        hours = self._salons.get(salon_id)
        return list(hours) if hours is not None else None
