from unittest.mock import MagicMock

import pytest
import requests

from wardrobe_api.errors import UpstreamModelError
from wardrobe_api.vision import ANALYSIS_PROMPT, CATEGORIES, VisionClient, extract_error_detail


def _response(status=200, json_body=None, text=""):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.ok = status < 400
    resp.text = text
    if json_body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_body
    return resp


def _client(resp=None, error=None):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = resp
    return VisionClient(api_key="sk-test", model="gpt-4o", temperature=0.1, max_tokens=150, timeout=5, session_factory=lambda: session), session


def test_prompt_lists_every_category():
    for c in CATEGORIES:
        assert f'"{c}"' in ANALYSIS_PROMPT
    assert '{"category": "unknown", "colors": [], "error": "Could not identify garment."}' in ANALYSIS_PROMPT


def test_complete_sends_single_user_turn_with_image():
    body = {"choices": [{"message": {"content": '{"category":"Top","colors":["blue"]}'}}]}
    client, session = _client(_response(json_body=body))

    content = client.complete("data:image/jpeg;base64,AAAA")

    assert content == '{"category":"Top","colors":["blue"]}'
    args, kwargs = session.post.call_args
    assert args[0] == "https://api.openai.com/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["timeout"] == 5
    payload = kwargs["json"]
    assert payload["model"] == "gpt-4o"
    assert payload["max_tokens"] == 150
    assert payload["temperature"] == 0.1
    assert len(payload["messages"]) == 1
    parts = payload["messages"][0]["content"]
    assert payload["messages"][0]["role"] == "user"
    assert parts[0] == {"type": "text", "text": ANALYSIS_PROMPT}
    assert parts[1] == {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,AAAA"}}


def test_error_detail_prefers_structured_message():
    resp = _response(status=401, json_body={"error": {"message": "Incorrect API key provided"}}, text="raw")
    assert extract_error_detail(resp) == "Incorrect API key provided"


def test_error_detail_accepts_string_error():
    resp = _response(status=400, json_body={"error": "bad request"})
    assert extract_error_detail(resp) == "bad request"


def test_error_detail_falls_back_to_text_then_status():
    assert extract_error_detail(_response(status=502, text="Bad Gateway")) == "Bad Gateway"
    assert extract_error_detail(_response(status=503)) == "Status: 503"


def test_non_success_status_raises_upstream_model_error():
    client, _ = _client(_response(status=429, json_body={"error": {"message": "Rate limit reached"}}))
    with pytest.raises(UpstreamModelError) as exc:
        client.complete("data:image/jpeg;base64,AAAA")
    assert exc.value.status == 429
    assert exc.value.detail == "Rate limit reached"
    assert exc.value.message == "OpenAI API error: Rate limit reached"


@pytest.mark.parametrize("body", [{"choices": []}, {"choices": [{"message": {"content": ""}}]}, {}])
def test_empty_completion_raises(body):
    client, _ = _client(_response(json_body=body))
    with pytest.raises(UpstreamModelError) as exc:
        client.complete("data:image/jpeg;base64,AAAA")
    assert "No response content" in exc.value.message


def test_network_error_is_wrapped():
    client, _ = _client(error=requests.Timeout("read timed out"))
    with pytest.raises(UpstreamModelError) as exc:
        client.complete("data:image/jpeg;base64,AAAA")
    assert exc.value.status is None


def test_non_text_completion_is_upstream_error():
    body = {"choices": [{"message": {"content": [{"type": "text", "text": "{}"}]}}]}
    client, session = _client(_response(json_body=body))
    with pytest.raises(UpstreamModelError) as exc:
        client.complete("data:image/jpeg;base64,AAAA")
    assert "Unexpected response content type" in exc.value.message
    session.close.assert_called_once_with()
