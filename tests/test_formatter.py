# tests/test_formatter.py
from dataclasses import replace

from lambdas.error_monitor.context import extract_context
from lambdas.error_monitor.formatter import SECTION_TEXT_LIMIT, format_slack_message


def test_message_layout(sample_event):
    context = extract_context(sample_event)

    message = format_slack_message(context, "x was read before it was set.")

    assert message["username"] == "Error Monitor"
    assert message["icon_emoji"] == ":robot_face:"
    header, analysis, details, exception = message["blocks"]

    assert header == {"type": "header", "text": {"type": "plain_text", "text": "⚠️ Error in api", "emoji": True}}
    assert analysis["text"] == {"type": "mrkdwn", "text": "*AI Analysis:*\nx was read before it was set."}
    assert [f["text"] for f in details["fields"]] == [
        "*URL:*\n/orders/42",
        "*Method:*\nPOST",
        "*Time:*\n2024-06-17T13:31:00.000Z",
    ]
    assert exception["text"]["text"] == "*Exception Details:*\n```TypeError: x is undefined```"


def test_absent_request_fields_show_placeholders(sample_event):
    context = replace(extract_context(sample_event), url=None, method=None)

    fields = format_slack_message(context, "summary")["blocks"][2]["fields"]

    assert fields[0]["text"] == "*URL:*\nN/A"
    assert fields[1]["text"] == "*Method:*\nN/A"


def test_oversized_exception_text_is_truncated_inside_code_fence(sample_event):
    context = replace(extract_context(sample_event), exceptions="E" * 10_000)

    text = format_slack_message(context, "summary")["blocks"][3]["text"]["text"]

    assert len(text) <= SECTION_TEXT_LIMIT
    assert text.startswith("*Exception Details:*\n```")
    assert text.endswith("…```")


def test_long_script_name_fits_header(sample_event):
    context = replace(extract_context(sample_event), script_name="s" * 500)

    header_text = format_slack_message(context, "summary")["blocks"][0]["text"]["text"]

    assert len(header_text) == 150
