from __future__ import annotations

from abc import ABC, abstractmethod

from salonbook.domain.entities.schedule import SalonHours, StylistWorkingHours


class ProviderDirectoryPort(ABC):
    @abstractmethod
    def get_stylist_schedule(self, user_id: str) -> StylistWorkingHours | None:
        """Get a stylist's weekly working hours. Returns None if the stylist is unknown."""
        raise NotImplementedError

    @abstractmethod
    def get_salon_hours(self, salon_id: str) -> list[SalonHours] | None:
        """Get a salon's opening hours. Returns None if the salon is unknown."""
        raise NotImplementedError
