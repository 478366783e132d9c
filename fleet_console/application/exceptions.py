from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fleet_console.domain.entities.booking import Booking


class InvalidDate(ValueError):
    """Raised when a scheduled date value cannot be read as a calendar date."""
    pass


class InvalidTime(ValueError):
    """Raised when time-of-day text is neither 12-hour nor 24-hour form."""
    pass


class BookingTransitionError(RuntimeError):
    """Base for failures of accept/decline. `reason` comes from the record store when it sent one."""

    default_message = "Failed to update booking"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or self.default_message)
        self.reason = reason

    @property
    def message(self) -> str:
        return self.reason or self.default_message


class StaleTransition(BookingTransitionError):
    """The remote record is no longer Pending."""

    default_message = "This booking was already responded to"


class TransitionFailed(BookingTransitionError):
    """Network, validation or authorization failure reported by the record store."""
    pass


class ResyncFailed(BookingTransitionError):
    """The mutation was applied but re-reading the collection failed."""

    default_message = "Booking updated, but the list could not be refreshed"

    def __init__(self, booking: Booking, reason: str | None = None) -> None:
        super().__init__(reason)
        self.booking = booking


class TransitionInProgress(BookingTransitionError):
    default_message = "A response for this booking is already being sent"


class BookingStoreError(RuntimeError):
    """Raised when the record store cannot list or create bookings."""
    pass


class BookingRequestInvalid(ValueError):
    pass
