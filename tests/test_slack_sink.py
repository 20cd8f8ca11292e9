# tests/test_slack_sink.py
from unittest.mock import MagicMock, patch

import requests

from lambdas.error_monitor.slack_sink import send_to_slack

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"
MESSAGE = {"username": "Error Monitor", "blocks": []}


def make_response(status_code: int) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = WEBHOOK_URL
    return response


@patch("lambdas.error_monitor.slack_sink.requests.post")
def test_posts_json_to_webhook(mock_post):
    mock_post.return_value = make_response(200)

    result = send_to_slack(MESSAGE, WEBHOOK_URL)

    assert result
    assert result.value == 200
    mock_post.assert_called_once_with(
        WEBHOOK_URL,
        json=MESSAGE,
        headers={"Content-Type": "application/json"},
        timeout=10,
    )


@patch("lambdas.error_monitor.slack_sink.requests.post")
def test_server_error_is_logged_not_raised(mock_post, capsys):
    mock_post.return_value = make_response(500)

    result = send_to_slack(MESSAGE, WEBHOOK_URL)

    assert not result
    assert result.error == "HTTP 500"
    assert "status: 500" in capsys.readouterr().out
    mock_post.assert_called_once()


@patch("lambdas.error_monitor.slack_sink.requests.post")
def test_network_error_is_logged_not_raised(mock_post):
    mock_post.side_effect = requests.exceptions.ConnectionError("connection refused")

    result = send_to_slack(MESSAGE, WEBHOOK_URL)

    assert not result
    assert "connection refused" in result.error


@patch("lambdas.error_monitor.slack_sink.requests.post")
def test_missing_webhook_url_skips_post(mock_post: MagicMock):
    result = send_to_slack(MESSAGE, None)

    assert not result
    mock_post.assert_not_called()
