from __future__ import annotations

from typing import Any

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from salonbook.application.exceptions import StoreFailure
from salonbook.application.ports.provider_directory import ProviderDirectoryPort
from salonbook.domain.entities.schedule import SalonHours, StylistWorkingHours, TimeWindow


class DynamoProviderDirectory(ProviderDirectoryPort):
    def __init__(
        self,
        stylist_table: Any,
        salon_table: Any,
        stylist_user_index: str = "byUser",
        salon_days_start_sunday: bool = True,
    ) -> None:
        self._stylist_table = stylist_table
        self._salon_table = salon_table
        self._stylist_user_index = stylist_user_index
        self._salon_days_start_sunday = salon_days_start_sunday

    def get_stylist_schedule(self, user_id: str) -> StylistWorkingHours | None:
        try:
            response = self._stylist_table.query(
                IndexName=self._stylist_user_index,
                KeyConditionExpression=Key("userId").eq(user_id),
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreFailure(f"Stylist lookup failed for {user_id}: {e}") from e

        items = response.get("Items") or []
        if not items:
            return None
        working_hours = items[0].get("workingHours") or {}
        return StylistWorkingHours(
            days=[str(d) for d in working_hours.get("days") or []],
            time_slots=[
                TimeWindow(start=str(slot.get("start")), end=str(slot.get("end")))
                for slot in working_hours.get("timeSlots") or []
            ],
        )

    def get_salon_hours(self, salon_id: str) -> list[SalonHours] | None:
        try:
            item = self._salon_table.get_item(Key={"id": salon_id}).get("Item")
        except (ClientError, BotoCoreError) as e:
            raise StoreFailure(f"Salon lookup failed for {salon_id}: {e}") from e

        if not item:
            return None
        hours: list[SalonHours] = []
        for entry in item.get("openingHours") or []:
            day = int(entry.get("day"))
            if self._salon_days_start_sunday:
                day = (day - 1) % 7
            hours.append(SalonHours(day=day, start=str(entry.get("start")), end=str(entry.get("end"))))
        return hours
