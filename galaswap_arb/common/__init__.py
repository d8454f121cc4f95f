from .logging import log_event, sanitize_text, sanitize_value

__all__ = [
    "log_event",
    "sanitize_text",
    "sanitize_value",
]
