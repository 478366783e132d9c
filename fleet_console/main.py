from fastapi import FastAPI

from fleet_console.api.countdown import router as countdown_router
from fleet_console.api.v1.bookings import router as bookings_router
from fleet_console.core.config import settings
from fleet_console.core.log_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Fleet Operations Console", version="1.0.0")

app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])
app.include_router(countdown_router, tags=["countdown"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
