from functools import lru_cache
import logging
import threading

from fleet_console.core.config import settings
from fleet_console.application.ports.booking_store import BookingStorePort
from fleet_console.application.scheduling.countdown_ticker import CountdownTicker
from fleet_console.application.use_cases.booking_board import BookingBoardUseCase
from fleet_console.application.use_cases.request_booking import RequestBookingUseCase
from fleet_console.domain.entities.viewer import Viewer
from fleet_console.infrastructure.store.http_store import HttpBookingStore
from fleet_console.infrastructure.store.memory_store import MemoryBookingStore


BOARD_CACHE_SIZE = 256

_board_lock = threading.Lock()


@lru_cache
def get_booking_store() -> BookingStorePort:
    logger = logging.getLogger(__name__)
    logger.info("ENV=%s STORE_PROVIDER=%s", settings.ENV, settings.STORE_PROVIDER)
    if settings.STORE_PROVIDER.lower() == "http" and settings.ENV.lower() not in {"dev", "local"}:
        logger.info("Using HttpBookingStore at %s", settings.RECORD_STORE_BASE_URL)
        return HttpBookingStore()
    logger.info("Using MemoryBookingStore")
    return MemoryBookingStore()


@lru_cache(maxsize=BOARD_CACHE_SIZE)
def _board_for(viewer: Viewer) -> BookingBoardUseCase:
    return BookingBoardUseCase(store=get_booking_store(), viewer=viewer, timezone=settings.timezone)


def get_board(viewer: Viewer) -> BookingBoardUseCase:
    # One board per viewer, least recently used boards are dropped.
    with _board_lock:
        return _board_for(viewer)


def get_request_booking_use_case() -> RequestBookingUseCase:
    return RequestBookingUseCase(store=get_booking_store())


def get_countdown_ticker() -> CountdownTicker:
    return CountdownTicker(timezone=settings.timezone, interval=settings.COUNTDOWN_INTERVAL_SECONDS)


def reset_boards() -> None:
    with _board_lock:
        _board_for.cache_clear()
