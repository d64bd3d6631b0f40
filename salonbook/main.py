import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from salonbook.api.v1.appointments import router as appointments_router
from salonbook.api.v1.providers import router as providers_router
from salonbook.core.config import settings
from salonbook.wiring.dependencies import get_periodic_sweeper


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "provider_id", "reason", "rejected", "total", "failed", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = get_periodic_sweeper() if settings.SWEEP_ENABLED else None
    if sweeper is not None:
        sweeper.start()
    try:
        yield
    finally:
        if sweeper is not None:
            await sweeper.stop()


app = FastAPI(title="Salon Booking Engine", version="1.0.0", lifespan=lifespan)

app.include_router(appointments_router, tags=["appointments"])
app.include_router(providers_router, tags=["providers"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
