# lambdas/error_monitor/models.py
"""
Plain-dataclass models and a simple settings class for the Error Monitor.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

# Don't send duplicate errors within this window
ERROR_WINDOW_SECONDS = 60 * 60

ANALYSIS_FALLBACK = "Unable to generate AI analysis"

# Only tail events with these outcomes are monitored
EXCEPTION_OUTCOMES = frozenset({"exception"})


class AppSettings:
    """
    Loads configuration settings directly from environment variables,
    providing sensible defaults for local testing.
    """
    def __init__(self):
        self.aws_region: str = os.getenv("AWS_REGION", "us-east-1")
        self.dedup_table_name: str = os.getenv("DEDUP_TABLE_NAME", "ErrorDedupTable")
        self.slack_webhook_url: Optional[str] = os.getenv("SLACK_WEBHOOK_URL") or None

        # Stage 1 is a reasoning model, stage 2 a fast instruction-tuned one
        self.analysis_model_id: str = os.getenv("ANALYSIS_MODEL_ID", "us.deepseek.r1-v1:0")
        self.summary_model_id: str = os.getenv("SUMMARY_MODEL_ID", "us.meta.llama3-3-70b-instruct-v1:0")


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Returns the shared settings instance, built on first use."""
    return AppSettings()


# Data models
@dataclass(frozen=True)
class ErrorContext:
    """
    Canonical view of a single tail event.
    This is a pure data container without extra methods.
    """
    timestamp: str
    script_name: Optional[str]
    url: Optional[str] = None
    method: Optional[str] = None
    # Newline-joined "timestamp [level] message" lines
    logs: str = ""
    # Newline-joined "name: message" lines
    exceptions: str = ""


class CallResult:
    """Outcome of a call to an external service (store, inference, webhook)."""
    def __init__(self, ok: bool, value: Any = None, error: str = ""):
        self.ok = ok
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: Any = None) -> "CallResult":
        return cls(True, value=value)

    @classmethod
    def failure(cls, error: str) -> "CallResult":
        return cls(False, error=error)

    def __bool__(self) -> bool:
        """Allows the object to be used in boolean contexts, like `if result:`."""
        return self.ok

    def __repr__(self) -> str:
        return f"CallResult(ok={self.ok}, error='{self.error}')"


class EventOutcome:
    """What happened to a single tail event inside the pipeline."""
    SKIPPED = "skipped"
    IGNORED = "ignored"
    DUPLICATE = "duplicate"
    NOTIFIED = "notified"
    FAILED = "failed"

    ALL = (SKIPPED, IGNORED, DUPLICATE, NOTIFIED, FAILED)
