# tests/test_replay_cli.py
import io
import json
from unittest.mock import MagicMock, patch

import pytest

from cli.replay_tail_events import DEFAULT_EVENTS_FILE, invoke_deployed, load_events, main


def test_sample_events_file_loads():
    events = load_events(DEFAULT_EVENTS_FILE)

    assert len(events) == 3
    assert events[0]["scriptName"] == "api"
    assert events[0]["exceptions"] == [{"name": "TypeError", "message": "x is undefined"}]


def test_events_dict_is_unwrapped(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps({"events": [{"outcome": "exception"}]}))

    assert load_events(path) == [{"outcome": "exception"}]


def test_non_list_payload_is_rejected(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(json.dumps("nope"))

    with pytest.raises(ValueError):
        load_events(path)


@patch("cli.replay_tail_events.boto3.client")
def test_invoke_deployed_sends_events(mock_client):
    lambda_client = MagicMock()
    lambda_client.invoke.return_value = {"Payload": io.BytesIO(b'{"statusCode": 200}')}
    mock_client.return_value = lambda_client

    result = invoke_deployed("error-monitor", [{"outcome": "exception"}], "us-east-1")

    assert result == {"statusCode": 200}
    kwargs = lambda_client.invoke.call_args.kwargs
    assert kwargs["FunctionName"] == "error-monitor"
    assert json.loads(kwargs["Payload"]) == {"events": [{"outcome": "exception"}]}


@patch("cli.replay_tail_events.run_local")
def test_main_runs_locally_by_default(mock_run_local):
    mock_run_local.return_value = {"statusCode": 200, "body": "{}"}

    result = main([str(DEFAULT_EVENTS_FILE)])

    assert result["statusCode"] == 200
    assert len(mock_run_local.call_args.args[0]) == 3
