"""
Tests for the DynamoDB adapters against an in-process fake table.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from botocore.exceptions import ClientError

from salonbook.application.exceptions import ConditionFailed, NotFoundError, StoreFailure
from salonbook.application.use_cases.calendar_resolver import CalendarResolver
from salonbook.domain.entities.booking import ACTIVE_STATUSES, BookingStatus, ProviderKind
from salonbook.domain.entities.schedule import DaySchedule
from salonbook.infrastructure.directory.dynamo_directory import DynamoProviderDirectory
from salonbook.infrastructure.store.booking_codec import booking_to_record
from salonbook.infrastructure.store.dynamo_store import DynamoBookingStore

NOW = datetime(2026, 10, 18, 12, 0)


def _client_error(code: str, operation: str = "UpdateItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeTable:
    def __init__(self, items=None, pages=None):
        self.items = {i["id"]: i for i in items or []}
        self.pages = list(pages or [])
        self.calls = []
        self.update_error = None

    def get_item(self, Key):
        item = self.items.get(Key["id"])
        return {"Item": item} if item else {}

    def put_item(self, Item):
        self.calls.append(("put_item", Item))
        self.items[Item["id"]] = Item

    def update_item(self, **kwargs):
        self.calls.append(("update_item", kwargs))
        if self.update_error is not None:
            raise self.update_error
        item = dict(self.items[kwargs["Key"]["id"]])
        for placeholder, name in kwargs["ExpressionAttributeNames"].items():
            item[name] = kwargs["ExpressionAttributeValues"][":" + placeholder[1:]]
        self.items[item["id"]] = item
        return {"Attributes": item}

    def query(self, **kwargs):
        self.calls.append(("query", kwargs))
        return self.pages.pop(0)

    def scan(self, **kwargs):
        self.calls.append(("scan", kwargs))
        return self.pages.pop(0)


def test_put_drops_empty_attributes_and_converts_floats(make_booking):
    table = FakeTable()

    DynamoBookingStore(table).put(make_booking(id="b1", amount=35.5))

    _, item = table.calls[0]
    assert item["amount"] == Decimal("35.5")
    assert "salonId" not in item
    assert "rejectedAt" not in item


def test_update_is_field_scoped_and_conditional(make_booking):
    table = FakeTable(items=[booking_to_record(make_booking(id="b1"))])

    updated = DynamoBookingStore(table).update_fields(
        "b1",
        {"status": BookingStatus.REJECTED, "rejection_reason": "date passed", "rejected_at": NOW},
        expected_statuses=ACTIVE_STATUSES,
    )

    _, kwargs = table.calls[0]
    assert kwargs["UpdateExpression"] == "SET #f0 = :f0, #f1 = :f1, #f2 = :f2"
    assert set(kwargs["ExpressionAttributeNames"].values()) == {"status", "rejectionReason", "rejectedAt"}
    assert kwargs["ConditionExpression"] is not None
    assert updated.status == BookingStatus.REJECTED
    assert updated.rejected_at == NOW


def test_failed_condition_on_existing_booking(make_booking):
    table = FakeTable(items=[booking_to_record(make_booking(id="b1"))])
    table.update_error = _client_error("ConditionalCheckFailedException")

    with pytest.raises(ConditionFailed):
        DynamoBookingStore(table).update_fields("b1", {"status": BookingStatus.CONFIRMED}, [BookingStatus.PENDING])


def test_failed_condition_on_missing_booking():
    table = FakeTable()
    table.update_error = _client_error("ConditionalCheckFailedException")

    with pytest.raises(NotFoundError):
        DynamoBookingStore(table).update_fields("ghost", {"notes": "x"})


def test_other_client_errors_are_store_failures(make_booking):
    table = FakeTable(items=[booking_to_record(make_booking(id="b1"))])
    table.update_error = _client_error("ProvisionedThroughputExceededException")

    with pytest.raises(StoreFailure):
        DynamoBookingStore(table).update_fields("b1", {"notes": "x"})


def test_query_follows_pagination(make_booking):
    first = booking_to_record(make_booking(id="b1"))
    second = booking_to_record(make_booking(id="b2", start_time="11:00", end_time="12:00"))
    table = FakeTable(pages=[{"Items": [first], "LastEvaluatedKey": {"id": "b1"}}, {"Items": [second]}])

    bookings = DynamoBookingStore(table).query_by_provider(
        ProviderKind.STYLIST, "stylist-1", on_date=date(2026, 10, 19), statuses=ACTIVE_STATUSES
    )

    assert [b.id for b in bookings] == ["b1", "b2"]
    assert table.calls[0][1]["IndexName"] == "byStylist"
    assert table.calls[1][1]["ExclusiveStartKey"] == {"id": "b1"}


def test_scan_failure_is_a_store_failure():
    class BrokenTable(FakeTable):
        def scan(self, **kwargs):
            raise _client_error("ResourceNotFoundException", "Scan")

    with pytest.raises(StoreFailure):
        DynamoBookingStore(BrokenTable()).scan_by_status(ACTIVE_STATUSES)


def test_stylist_working_hours_from_profile():
    stylists = FakeTable(
        pages=[
            {
                "Items": [
                    {
                        "id": "profile-1",
                        "userId": "stylist-1",
                        "workingHours": {
                            "days": ["Monday", "Friday"],
                            "timeSlots": [{"start": "09:00", "end": "17:00"}, {"start": "10:00", "end": "16:00"}],
                        },
                    }
                ]
            },
            {"Items": []},
        ]
    )
    directory = DynamoProviderDirectory(stylist_table=stylists, salon_table=FakeTable())

    hours = directory.get_stylist_schedule("stylist-1")

    assert hours.days == ["Monday", "Friday"]
    assert hours.time_slots[1].start == "10:00"
    assert directory.get_stylist_schedule("nobody") is None


def test_salon_days_numbered_from_sunday():
    salons = FakeTable(
        items=[{"id": "salon-1", "openingHours": [{"day": Decimal(1), "start": "09:00", "end": "19:00"}]}]
    )

    hours = DynamoProviderDirectory(FakeTable(), salons).get_salon_hours("salon-1")
    plain = DynamoProviderDirectory(FakeTable(), salons, salon_days_start_sunday=False).get_salon_hours("salon-1")

    # stored rows count from Sunday, so 1 = Monday
    assert hours[0].day == 0
    assert plain[0].day == 1
    assert DynamoProviderDirectory(FakeTable(), salons).get_salon_hours("ghost") is None


def test_stored_schedules_resolve_on_the_right_day():
    """French stylist days and Sunday-based salon days land on the same Monday."""
    stylists = FakeTable(
        pages=[
            {
                "Items": [
                    {
                        "userId": "stylist-1",
                        "workingHours": {"days": ["Lundi"], "timeSlots": [{"start": "09:00", "end": "17:00"}]},
                    }
                ]
            }
        ]
    )
    salons = FakeTable(
        items=[{"id": "salon-1", "openingHours": [{"day": Decimal(1), "start": "10:00", "end": "19:00"}]}]
    )
    resolver = CalendarResolver(DynamoProviderDirectory(stylists, salons))
    monday = date(2026, 10, 19)

    assert resolver.resolve_schedule(ProviderKind.STYLIST, "stylist-1", monday) == DaySchedule(540, 1020)
    assert resolver.resolve_schedule(ProviderKind.SALON, "salon-1", monday) == DaySchedule(600, 1140)
    assert resolver.resolve_schedule(ProviderKind.SALON, "salon-1", date(2026, 10, 18)) is None
