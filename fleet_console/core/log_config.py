import logging

CONTEXT_KEYS = ("booking_id", "kind", "role", "actor_id", "status", "reason", "error")
LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


class BookingContextFormatter(logging.Formatter):
    """Appends booking context passed through `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        if not context:
            return line
        return f"{line} | {' '.join(context)}"


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(BookingContextFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers = [handler]
