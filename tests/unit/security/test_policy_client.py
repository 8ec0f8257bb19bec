"""Policy client tests: open when unconfigured, fail closed when the configured PDP fails."""

import json

import httpx
import pytest

from app.security.policy_client import PolicyClient
from app.security.policy_models import PolicyOutcome, PolicyQuery, PolicyReason

PDP_URL = "http://opa.test/v1/data/agent/allow"


def _query() -> PolicyQuery:
    return PolicyQuery(action="delete", resource="contacts", user={"role": "admin"})


def _client(handler) -> PolicyClient:
    return PolicyClient(opa_url=PDP_URL, transport=httpx.MockTransport(handler))


def _respond(status_code: int = 200, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return handler


async def test_unconfigured_pdp_allows():
    client = PolicyClient(opa_url=None)
    assert await client.check_policy(_query()) is True
    evaluation = await client.evaluate(_query())
    assert evaluation.outcome is PolicyOutcome.NOT_ENFORCED
    assert evaluation.reason is PolicyReason.PDP_NOT_CONFIGURED
    assert client.enforced is False


async def test_empty_url_counts_as_unconfigured():
    assert await PolicyClient(opa_url="").check_policy(_query()) is True


async def test_request_carries_input_document():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": True})

    assert await _client(handler).check_policy(_query()) is True
    assert seen["method"] == "POST"
    assert seen["url"] == PDP_URL
    assert seen["content_type"] == "application/json"
    assert seen["body"] == {
        "input": {"action": "delete", "resource": "contacts", "user": {"role": "admin"}}
    }


async def test_result_true_allows():
    client = _client(_respond(json={"result": True}))
    evaluation = await client.evaluate(_query())
    assert evaluation.outcome is PolicyOutcome.ALLOWED
    assert evaluation.allowed is True


async def test_result_false_denies():
    client = _client(_respond(json={"result": False}))
    assert await client.check_policy(_query()) is False
    evaluation = await client.evaluate(_query())
    assert evaluation.reason is PolicyReason.PDP_DENIED


async def test_missing_result_denies():
    assert await _client(_respond(json={"decision_id": "abc"})).check_policy(_query()) is False


@pytest.mark.parametrize("value", ["true", 1, {"allow": True}, [True], None])
async def test_non_boolean_result_denies(value):
    assert await _client(_respond(json={"result": value})).check_policy(_query()) is False


async def test_non_object_body_denies():
    assert await _client(_respond(json=[{"result": True}])).check_policy(_query()) is False


async def test_http_500_error_page_denies():
    client = _client(_respond(500, text="Internal Server Error"))
    assert await client.check_policy(_query()) is False
    evaluation = await client.evaluate(_query())
    assert evaluation.reason is PolicyReason.PDP_MALFORMED_RESPONSE


async def test_non_json_body_denies():
    assert await _client(_respond(text="<html>ok</html>")).check_policy(_query()) is False


async def test_network_error_denies_and_does_not_raise(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    assert await client.check_policy(_query()) is False
    evaluation = await client.evaluate(_query())
    assert evaluation.outcome is PolicyOutcome.DENIED
    assert evaluation.reason is PolicyReason.PDP_UNREACHABLE
    assert any(r.getMessage() == "pdp_unreachable" for r in caplog.records)


async def test_timeout_denies():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert await _client(handler).check_policy(_query()) is False


async def test_each_check_is_a_fresh_round_trip():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"result": True})

    client = _client(handler)
    await client.check_policy(_query())
    await client.check_policy(_query())
    assert len(calls) == 2


def test_query_is_immutable():
    query = _query()
    with pytest.raises(AttributeError):
        query.action = "get"  # type: ignore[misc]
