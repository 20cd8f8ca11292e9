# lambdas/error_monitor/slack_sink.py
from typing import Any, Dict, Optional

import requests

from .models import CallResult

REQUEST_TIMEOUT_SECONDS = 10


def send_to_slack(message: Dict[str, Any], webhook_url: Optional[str]) -> CallResult:
    """
    Posts a Block Kit message to a Slack incoming webhook.
    Failures are logged and returned, never raised or retried.
    """
    if not webhook_url:
        print(" -> ℹ️ SLACK_WEBHOOK_URL not set. Skipping Slack notification.")
        return CallResult.failure("webhook URL not configured")

    try:
        response = requests.post(
            webhook_url,
            json=message,
            headers={"Content-Type": "application/json"},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "unknown"
        print(f" -> ❌ Slack API responded with status: {status}")
        return CallResult.failure(f"HTTP {status}")
    except requests.exceptions.RequestException as e:
        print(f" -> ⚠️ Could not send Slack notification due to a network error: {e}")
        return CallResult.failure(str(e))

    print(" -> ✅ Message sent to Slack successfully.")
    return CallResult.success(response.status_code)
