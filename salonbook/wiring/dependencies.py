from functools import lru_cache
import logging

import boto3

from salonbook.core.config import settings
from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.application.ports.clock import ClockPort
from salonbook.application.ports.provider_directory import ProviderDirectoryPort
from salonbook.application.ports.service_catalog import ServiceCatalogPort
from salonbook.application.use_cases.availability import AvailabilityUseCase
from salonbook.application.use_cases.bookings import BookingService
from salonbook.application.use_cases.calendar_resolver import CalendarResolver
from salonbook.application.use_cases.conflict_index import BookingConflictIndex
from salonbook.application.use_cases.rejection_scheduler import PeriodicSweeper, RejectionScheduler
from salonbook.domain.entities.lifecycle import LifecyclePolicy
from salonbook.infrastructure.catalog.service_catalog_store import DynamoServiceCatalog, ServiceCatalogStore
from salonbook.infrastructure.clock import SystemClock
from salonbook.infrastructure.directory.dynamo_directory import DynamoProviderDirectory
from salonbook.infrastructure.directory.memory_directory import MemoryProviderDirectory
from salonbook.infrastructure.seed import load_seed
from salonbook.infrastructure.store.dynamo_store import DynamoBookingStore
from salonbook.infrastructure.store.json_store import JsonBookingStore
from salonbook.infrastructure.store.memory_store import MemoryBookingStore


logger = logging.getLogger(__name__)


def _use_dynamodb() -> bool:
    return settings.STORE_PROVIDER.lower() == "dynamodb"


@lru_cache
def get_dynamodb():
    return boto3.resource(
        "dynamodb",
        region_name=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
    )


@lru_cache
def get_booking_store() -> BookingStorePort:
    provider = settings.STORE_PROVIDER.lower()
    logger.info("STORE_PROVIDER=%s", provider)
    if provider == "dynamodb":
        return DynamoBookingStore(
            table=get_dynamodb().Table(settings.BOOKING_TABLE),
            stylist_index=settings.BOOKING_STYLIST_INDEX,
            salon_index=settings.BOOKING_SALON_INDEX,
            client_index=settings.BOOKING_CLIENT_INDEX,
            timezone=settings.BUSINESS_TIMEZONE,
        )
    if provider == "json":
        return JsonBookingStore(data_dir=settings.JSON_STORE_PATH, timezone=settings.BUSINESS_TIMEZONE)
    return MemoryBookingStore()


@lru_cache
def _memory_registry() -> tuple[MemoryProviderDirectory, ServiceCatalogStore]:
    directory = MemoryProviderDirectory()
    catalog = ServiceCatalogStore()
    if settings.SEED_PATH:
        load_seed(settings.SEED_PATH, directory, catalog)
        logger.info("Loaded providers and services from %s", settings.SEED_PATH)
    return directory, catalog


@lru_cache
def get_provider_directory() -> ProviderDirectoryPort:
    if _use_dynamodb():
        db = get_dynamodb()
        return DynamoProviderDirectory(
            stylist_table=db.Table(settings.STYLIST_TABLE),
            salon_table=db.Table(settings.SALON_TABLE),
            stylist_user_index=settings.STYLIST_USER_INDEX,
            salon_days_start_sunday=settings.SALON_DAYS_START_SUNDAY,
        )
    return _memory_registry()[0]


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    if _use_dynamodb():
        return DynamoServiceCatalog(table=get_dynamodb().Table(settings.SERVICE_TABLE))
    return _memory_registry()[1]


@lru_cache
def get_clock() -> ClockPort:
    return SystemClock(settings.BUSINESS_TIMEZONE)


def get_lifecycle_policy() -> LifecyclePolicy:
    return LifecyclePolicy(
        pending_response_hours=settings.PENDING_RESPONSE_HOURS,
        expire_soon_hours=settings.EXPIRE_SOON_HOURS,
        critical_hours=settings.CRITICAL_HOURS,
        cancellation_notice_hours=settings.CANCELLATION_NOTICE_HOURS,
    )


def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        resolver=CalendarResolver(get_provider_directory()),
        conflicts=BookingConflictIndex(get_booking_store()),
        step_minutes=settings.SLOT_STEP_MINUTES,
    )


def get_rejection_scheduler() -> RejectionScheduler:
    return RejectionScheduler(
        store=get_booking_store(),
        clock=get_clock(),
        policy=get_lifecycle_policy(),
    )


def get_booking_service() -> BookingService:
    return BookingService(
        store=get_booking_store(),
        catalog=get_service_catalog(),
        availability=get_availability_use_case(),
        scheduler=get_rejection_scheduler(),
        clock=get_clock(),
        policy=get_lifecycle_policy(),
    )


def get_periodic_sweeper() -> PeriodicSweeper:
    return PeriodicSweeper(
        scheduler=get_rejection_scheduler(),
        interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
        run_on_start=settings.SWEEP_ON_STARTUP,
    )
