from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from salonbook.domain.entities.booking import Booking, ProviderKind


class CallerRole(str, Enum):
    CLIENT = "client"
    STYLIST = "stylist"
    SALON = "salon"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: CallerRole

    @property
    def is_admin(self) -> bool:
        return self.role == CallerRole.ADMIN

    @property
    def provider_kind(self) -> ProviderKind | None:
        if self.role == CallerRole.STYLIST:
            return ProviderKind.STYLIST
        if self.role == CallerRole.SALON:
            return ProviderKind.SALON
        return None

    def is_client_of(self, booking: Booking) -> bool:
        return booking.client_id == self.user_id

    def is_provider_of(self, booking: Booking) -> bool:
        return self.provider_kind == booking.provider_kind and booking.provider_id == self.user_id
