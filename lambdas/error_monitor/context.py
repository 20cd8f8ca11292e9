# lambdas/error_monitor/context.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import ErrorContext


def _format_iso(dt_object: datetime) -> str:
    return dt_object.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_iso_timestamp(value: Any) -> Optional[str]:
    """
    Converts an epoch-milliseconds value (or an ISO 8601 string) into a
    UTC ISO 8601 string with millisecond precision, e.g. "2024-06-17T13:31:00.000Z".
    Returns None if the value cannot be interpreted as a point in time.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            dt_object = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        elif isinstance(value, str):
            dt_object = datetime.fromisoformat(value.replace('Z', '+00:00'))
            if dt_object.tzinfo is None:
                dt_object = dt_object.replace(tzinfo=timezone.utc)
        else:
            return None
    except (ValueError, TypeError, OverflowError, OSError):
        return None
    return _format_iso(dt_object)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _message_text(message: Any) -> str:
    # Tail events carry console arguments as a list
    if isinstance(message, list):
        return ",".join("" if part is None else str(part) for part in message)
    return "" if message is None else str(message)


def format_logs(logs: List[Any]) -> str:
    """Renders log entries as "timestamp [level] message", one per line."""
    lines = []
    for log in logs:
        log = _as_dict(log)
        timestamp = to_iso_timestamp(log.get("timestamp")) or "N/A"
        lines.append(f"{timestamp} [{log.get('level', 'log')}] {_message_text(log.get('message'))}")
    return "\n".join(lines)


def format_exceptions(exceptions: List[Any]) -> str:
    """Renders exception entries as "name: message", one per line."""
    lines = []
    for ex in exceptions:
        ex = _as_dict(ex)
        lines.append(f"{ex.get('name', 'Error')}: {_message_text(ex.get('message'))}")
    return "\n".join(lines)


def extract_context(event: Dict[str, Any]) -> ErrorContext:
    """
    Builds an ErrorContext from a raw tail event. Never raises: every
    optional part of the event falls back to None or an empty string.
    """
    event = _as_dict(event)
    request = _as_dict(_as_dict(event.get("event")).get("request"))

    timestamp = to_iso_timestamp(event.get("eventTimestamp"))
    if timestamp is None:
        timestamp = _format_iso(datetime.now(timezone.utc))

    return ErrorContext(
        timestamp=timestamp,
        script_name=event.get("scriptName"),
        url=request.get("url"),
        method=request.get("method"),
        logs=format_logs(_as_list(event.get("logs"))),
        exceptions=format_exceptions(_as_list(event.get("exceptions"))),
    )
