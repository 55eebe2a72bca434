import asyncio
import json

import httpx
import pytest

from backend.app.errors import NetworkError


def test_posts_chat_completion_request(client_factory, reply) -> None:
    client, transport = client_factory(lambda request: reply("hello"))

    text = asyncio.run(client.complete("system text", user_message="user text"))

    assert text == "hello"
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer test-key"
    body = json.loads(request.content)
    assert body["model"] == client.model
    assert body["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]


def test_omits_user_message_when_not_given(client_factory, reply) -> None:
    client, transport = client_factory(lambda request: reply("ok"))
    asyncio.run(client.complete("only system"))
    assert json.loads(transport.requests[0].content)["messages"] == [{"role": "system", "content": "only system"}]


@pytest.mark.parametrize(
    "envelope",
    [{}, {"choices": []}, {"choices": [{"message": {}}]}, {"choices": [{"message": {"content": None}}]}, []],
)
def test_unexpected_envelope_returns_empty_string(client_factory, envelope) -> None:
    client, _ = client_factory(lambda request: httpx.Response(200, json=envelope))
    assert asyncio.run(client.complete("x")) == ""


def test_http_error_status_raises_network_error(client_factory) -> None:
    client, _ = client_factory(lambda request: httpx.Response(500, text="upstream down"))
    with pytest.raises(NetworkError):
        asyncio.run(client.complete("x"))


def test_transport_failure_raises_network_error(client_factory, offline) -> None:
    client, _ = client_factory(offline)
    with pytest.raises(NetworkError):
        asyncio.run(client.complete("x"))


def test_non_json_body_raises_network_error(client_factory) -> None:
    client, _ = client_factory(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(NetworkError):
        asyncio.run(client.complete("x"))


def test_missing_key_fails_without_a_request(client_factory, reply) -> None:
    client, transport = client_factory(lambda request: reply("never"))
    client.api_key = None
    with pytest.raises(NetworkError):
        asyncio.run(client.complete("x"))
    assert transport.requests == []
