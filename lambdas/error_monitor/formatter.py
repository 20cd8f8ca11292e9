# lambdas/error_monitor/formatter.py
from typing import Any, Dict

from .models import ErrorContext

USERNAME = "Error Monitor"
ICON_EMOJI = ":robot_face:"

# Slack Block Kit limits
HEADER_TEXT_LIMIT = 150
SECTION_TEXT_LIMIT = 3000
FIELD_TEXT_LIMIT = 2000


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"


def _mrkdwn(text: str, limit: int = SECTION_TEXT_LIMIT) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": _truncate(text, limit)}


def create_header_block(context: ErrorContext) -> Dict[str, Any]:
    return {
        "type": "header",
        "text": {
            "type": "plain_text",
            "text": _truncate(f"⚠️ Error in {context.script_name or 'unknown script'}", HEADER_TEXT_LIMIT),
            "emoji": True,
        },
    }


def create_ai_analysis_block(ai_summary: str) -> Dict[str, Any]:
    return {"type": "section", "text": _mrkdwn(f"*AI Analysis:*\n{ai_summary}")}


def create_context_block(context: ErrorContext) -> Dict[str, Any]:
    return {
        "type": "section",
        "fields": [
            _mrkdwn(f"*URL:*\n{context.url or 'N/A'}", FIELD_TEXT_LIMIT),
            _mrkdwn(f"*Method:*\n{context.method or 'N/A'}", FIELD_TEXT_LIMIT),
            _mrkdwn(f"*Time:*\n{context.timestamp or 'N/A'}", FIELD_TEXT_LIMIT),
        ],
    }


def create_exception_block(context: ErrorContext) -> Dict[str, Any]:
    heading = "*Exception Details:*\n"
    # Keep the code fence closed when the exception text is cut short
    room = SECTION_TEXT_LIMIT - len(heading) - len("``````")
    return {"type": "section", "text": _mrkdwn(f"{heading}```{_truncate(context.exceptions, room)}```")}


def format_slack_message(context: ErrorContext, ai_summary: str) -> Dict[str, Any]:
    """Builds the Slack Block Kit message for one error."""
    return {
        "username": USERNAME,
        "icon_emoji": ICON_EMOJI,
        "blocks": [
            create_header_block(context),
            create_ai_analysis_block(ai_summary),
            create_context_block(context),
            create_exception_block(context),
        ],
    }
