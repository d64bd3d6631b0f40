from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Europe/Paris"

    SLOT_STEP_MINUTES: int = 60
    PENDING_RESPONSE_HOURS: int = 48
    EXPIRE_SOON_HOURS: int = 24
    CRITICAL_HOURS: int = 6
    CANCELLATION_NOTICE_HOURS: int = 24

    SWEEP_ENABLED: bool = True
    SWEEP_INTERVAL_SECONDS: float = 3600.0
    SWEEP_ON_STARTUP: bool = True

    STORE_PROVIDER: str = "memory"  # "memory" | "json" | "dynamodb"
    JSON_STORE_PATH: str = "./data/bookings"
    SEED_PATH: str | None = None

    AWS_REGION: str = "eu-west-3"
    DYNAMODB_ENDPOINT_URL: str | None = None
    BOOKING_TABLE: str = "Booking"
    STYLIST_TABLE: str = "Stylist"
    SALON_TABLE: str = "Salon"
    SERVICE_TABLE: str = "Service"
    STYLIST_USER_INDEX: str = "byUser"
    BOOKING_STYLIST_INDEX: str = "byStylist"
    BOOKING_SALON_INDEX: str = "bySalon"
    BOOKING_CLIENT_INDEX: str = "byUser"
    SALON_DAYS_START_SUNDAY: bool = True  # openingHours.day stored with 0 = Sunday


settings = Settings()
