from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from salonbook.application.exceptions import ConditionFailed, NotFoundError, StoreFailure
from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind
from salonbook.infrastructure.store.booking_codec import booking_to_record, fields_to_record, record_to_booking


class DynamoBookingStore(BookingStorePort):
    """
    DynamoDB-backed booking table.

    Updates are field-scoped `SET` expressions guarded by a `ConditionExpression`
    on the current status, so concurrent writers never overwrite whole records.
    """

    def __init__(
        self,
        table: Any,
        stylist_index: str = "byStylist",
        salon_index: str = "bySalon",
        client_index: str = "byUser",
        timezone: str = "Europe/Paris",
    ) -> None:
        self._table = table
        self._tz = ZoneInfo(timezone)
        self._stylist_index = stylist_index
        self._salon_index = salon_index
        self._client_index = client_index
        self._logger = logging.getLogger(__name__)

    def get(self, booking_id: str) -> Booking | None:
        try:
            item = self._table.get_item(Key={"id": booking_id}).get("Item")
        except (ClientError, BotoCoreError) as e:
            raise StoreFailure(f"get_item failed for booking {booking_id}: {e}") from e
        return record_to_booking(item, self._tz) if item else None

    def put(self, booking: Booking) -> None:
        try:
            self._table.put_item(Item=_to_item(booking_to_record(booking)))
        except (ClientError, BotoCoreError) as e:
            raise StoreFailure(f"put_item failed for booking {booking.id}: {e}") from e

    def update_fields(
        self,
        booking_id: str,
        fields: dict[str, Any],
        expected_statuses: Iterable[BookingStatus] | None = None,
    ) -> Booking:
        record = fields_to_record(fields)
        if not record:
            raise ValueError("Nothing to update")

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        assignments: list[str] = []
        for i, (key, value) in enumerate(record.items()):
            names[f"#f{i}"] = key
            values[f":f{i}"] = _to_attr(value)
            assignments.append(f"#f{i} = :f{i}")

        condition = Attr("id").exists()
        if expected_statuses is not None:
            condition = condition & Attr("status").is_in([s.value for s in expected_statuses])

        try:
            response = self._table.update_item(
                Key={"id": booking_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression=condition,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                if self.get(booking_id) is None:
                    raise NotFoundError(f"Booking {booking_id} not found") from e
                raise ConditionFailed(f"Booking {booking_id} changed status concurrently") from e
            raise StoreFailure(f"update_item failed for booking {booking_id}: {e}") from e
        except BotoCoreError as e:
            raise StoreFailure(f"update_item failed for booking {booking_id}: {e}") from e
        return record_to_booking(response["Attributes"], self._tz)

    def delete(self, booking_id: str) -> None:
        try:
            self._table.delete_item(Key={"id": booking_id})
        except (ClientError, BotoCoreError) as e:
            raise StoreFailure(f"delete_item failed for booking {booking_id}: {e}") from e

    def query_by_provider(
        self,
        provider_kind: ProviderKind,
        provider_id: str,
        on_date: date | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        if provider_kind == ProviderKind.STYLIST:
            index, key = self._stylist_index, "stylistId"
        else:
            index, key = self._salon_index, "salonId"

        params: dict[str, Any] = {
            "IndexName": index,
            "KeyConditionExpression": Key(key).eq(provider_id),
        }
        filters = None
        if on_date is not None:
            filters = Attr("date").eq(on_date.isoformat())
        if statuses is not None:
            status_filter = Attr("status").is_in([s.value for s in statuses])
            filters = status_filter if filters is None else filters & status_filter
        if filters is not None:
            params["FilterExpression"] = filters
        return self._paginate(self._table.query, params)

    def query_by_client(self, client_id: str) -> list[Booking]:
        params = {
            "IndexName": self._client_index,
            "KeyConditionExpression": Key("userId").eq(client_id),
        }
        return self._paginate(self._table.query, params)

    def scan_by_status(self, statuses: Iterable[BookingStatus]) -> list[Booking]:
        params = {"FilterExpression": Attr("status").is_in([s.value for s in statuses])}
        return self._paginate(self._table.scan, params)

    def _paginate(self, operation: Any, params: dict[str, Any]) -> list[Booking]:
        bookings: list[Booking] = []
        start_key = None
        while True:
            call_params = dict(params)
            if start_key:
                call_params["ExclusiveStartKey"] = start_key
            try:
                response = operation(**call_params)
            except (ClientError, BotoCoreError) as e:
                raise StoreFailure(f"Booking table read failed: {e}") from e
            bookings.extend(record_to_booking(item, self._tz) for item in response.get("Items", []))
            start_key = response.get("LastEvaluatedKey")
            if not start_key:
                return bookings


def _to_attr(value: Any) -> Any:
    # DynamoDB rejects Python floats
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def _to_item(record: dict[str, Any]) -> dict[str, Any]:
    return {k: _to_attr(v) for k, v in record.items() if v is not None}
