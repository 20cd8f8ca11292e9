# lambdas/error_monitor/app.py
import json
from typing import Any, Dict, List

from .analysis import AnalysisEngine
from .bedrock_client import BedrockInference
from .dedup_store import DedupStore
from .models import EventOutcome, get_settings
from .pipeline import ErrorMonitor

# Built on first invocation and reused by warm Lambda invocations.
MONITOR = None


def build_monitor() -> ErrorMonitor:
    """Wires the pipeline to DynamoDB, Bedrock and Slack from environment settings."""
    settings = get_settings()
    return ErrorMonitor(
        dedup_store=DedupStore(),
        analysis_engine=AnalysisEngine(BedrockInference()),
        webhook_url=settings.slack_webhook_url,
    )


def get_monitor() -> ErrorMonitor:
    global MONITOR
    if MONITOR is None:
        MONITOR = build_monitor()
    return MONITOR


def parse_incoming_events(event: Any) -> List[Dict[str, Any]]:
    """Accepts either a bare list of tail events or a dict with an `events` list."""
    if isinstance(event, list):
        return event
    if isinstance(event, dict) and isinstance(event.get("events"), list):
        return event["events"]
    return []


def handler(event, context):
    """
    Main Lambda handler. Receives a batch of tail events and notifies Slack
    about every new, non-junk exception in it.
    """
    print("--- Error Monitor Lambda Triggered ---")
    events = parse_incoming_events(event)
    if not events:
        print("ℹ️ No tail events to process. Exiting.")
        return {"statusCode": 200, "body": json.dumps({outcome: 0 for outcome in EventOutcome.ALL})}

    outcomes = get_monitor().process_events(events)
    print(f"✅ Processed {len(events)} event(s): {dict(outcomes)}")
    return {"statusCode": 200, "body": json.dumps(dict(outcomes))}
