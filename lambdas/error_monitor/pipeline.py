# lambdas/error_monitor/pipeline.py
from collections import Counter
from typing import Any, Dict, Iterable, Optional

from .context import extract_context
from .fingerprint import generate_fingerprint
from .formatter import format_slack_message
from .models import EXCEPTION_OUTCOMES, EventOutcome
from .noise_filter import should_ignore
from .slack_sink import send_to_slack


class ErrorMonitor:
    """
    Runs each tail event through filter -> fingerprint -> dedup -> analysis ->
    Slack -> record. Events are handled one at a time and independently: a
    failure while handling one event never stops the rest of the batch.
    """
    def __init__(self, dedup_store, analysis_engine, webhook_url: Optional[str]):
        self.dedup_store = dedup_store
        self.analysis_engine = analysis_engine
        self.webhook_url = webhook_url

    def process_event(self, event: Dict[str, Any]) -> str:
        if not isinstance(event, dict) or event.get("outcome") not in EXCEPTION_OUTCOMES:
            return EventOutcome.SKIPPED

        context = extract_context(event)

        # Junk requests never reach the store or the AI backend
        if should_ignore(context.url):
            print(f" -> Ignoring URL: {context.url}")
            return EventOutcome.IGNORED

        error_hash = generate_fingerprint(context)
        if self.dedup_store.is_duplicate(error_hash):
            print(f" -> Duplicate error detected, hash: {error_hash}")
            return EventOutcome.DUPLICATE

        ai_summary = self.analysis_engine.summarize(context)
        message = format_slack_message(context, ai_summary)
        send_to_slack(message, self.webhook_url)

        # Recorded whether or not the Slack delivery succeeded
        self.dedup_store.record(error_hash)
        return EventOutcome.NOTIFIED

    def process_events(self, events: Iterable[Dict[str, Any]]) -> Counter:
        outcomes = Counter({outcome: 0 for outcome in EventOutcome.ALL})
        for i, event in enumerate(events):
            try:
                outcome = self.process_event(event)
            except Exception as e:
                print(f" -> ❌ Could not process event #{i + 1}: {e}")
                outcome = EventOutcome.FAILED
            outcomes[outcome] += 1
        return outcomes
