# lambdas/error_monitor/fingerprint.py
import hashlib
import json

from .models import ErrorContext

FINGERPRINT_LENGTH = 64  # hex digits of a SHA-256 digest


class FingerprintError(RuntimeError):
    """Raised when an error fingerprint cannot be computed."""
    pass


def serialize_error_details(context: ErrorContext) -> str:
    """
    Canonical JSON of the fields that identify an error. Timestamp and logs are
    left out so that transient log noise does not split one error into many.
    Absent fields are omitted rather than written as null.
    """
    error_details = {
        "scriptName": context.script_name,
        "exceptions": context.exceptions,
        "url": context.url,
        "method": context.method,
    }
    error_details = {k: v for k, v in error_details.items() if v is not None}
    return json.dumps(error_details, separators=(",", ":"), ensure_ascii=False, default=str)


def generate_fingerprint(context: ErrorContext) -> str:
    """Returns the lowercase hex SHA-256 of the serialized error details."""
    text = serialize_error_details(context)
    try:
        digest = hashlib.sha256(text.encode("utf-8", errors="replace")).hexdigest()
    except (ValueError, TypeError) as e:
        raise FingerprintError(f"Could not hash error details: {e}") from e

    if len(digest) != FINGERPRINT_LENGTH:
        raise FingerprintError(f"Unexpected digest length {len(digest)}")
    return digest
