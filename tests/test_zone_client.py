"""Tests for the HTTP zone client."""

import json

import httpx
import pytest

from dashboard.ZoneClient import ApiResult, ZoneClient
from dashboard.defaults import default_zone
from dashboard.models import ZoneData


def make_client(handler):
    transport = httpx.MockTransport(handler)
    return ZoneClient(client=httpx.Client(transport=transport, base_url="http://edudash.test"))


def test_fetch_zone_parses_document(valid_zone):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": valid_zone})

    zone = make_client(handler).fetch_zone("class-9")

    assert seen[0].url.params["key"] == "class-9"
    assert [item.id for item in zone.contents] == ["f1"]


def test_fetch_zone_without_key_sends_no_query():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": {"categories": [], "videos": []}})

    zone = make_client(handler).fetch_zone()

    assert "key" not in seen[0].url.params
    assert zone.contents is None


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, json={"data": None}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"data": {"contents": [{"id": "x", "type": "audio"}]}}),
    ],
)
def test_fetch_zone_falls_back_to_default(response):
    zone = make_client(lambda request: response).fetch_zone()

    assert zone == default_zone()


def test_fetch_zone_network_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    zone = make_client(handler).fetch_zone()

    assert zone.contents
    assert zone == default_zone()


def test_save_zone_posts_key_and_data():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    result = make_client(handler).save_zone(ZoneData(contents=[]), key="class-9")

    assert result == ApiResult(ok=True)
    assert bodies[0] == {
        "key": "class-9",
        "data": {"categories": [], "videos": [], "contents": []},
    }


def test_save_zone_reports_server_error():
    client = make_client(lambda request: httpx.Response(401, json={"error": "Unauthorized"}))

    assert client.save_zone(ZoneData()) == ApiResult(ok=False, error="Unauthorized")


def test_save_zone_without_error_body():
    client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

    assert client.save_zone(ZoneData()) == ApiResult(ok=False, error="Failed to save")


def test_save_zone_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert make_client(handler).save_zone(ZoneData()) == ApiResult(
        ok=False, error="Network error"
    )


def test_login_and_session():
    def handler(request):
        if request.url.path == "/api/login":
            body = json.loads(request.content)
            if body["password"] == "10820":
                return httpx.Response(200, json={"ok": True, "admin": True})
            return httpx.Response(401, json={"ok": False, "error": "Invalid credentials"})
        return httpx.Response(200, json={"authenticated": True, "admin": True})

    client = make_client(handler)

    assert client.login("Rehan", "wrong") == ApiResult(ok=False, error="Invalid credentials")
    assert client.login("Rehan", "10820").ok
    assert client.session() == {"authenticated": True, "admin": True}


def test_session_on_network_error_is_anonymous():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert make_client(handler).session() == {"authenticated": False, "admin": False}


def test_fetch_zone_skips_malformed_nested_categories():
    document = {
        "categories": [{"id": "a", "name": "A", "children": ["oops", {"id": "b", "name": "B"}]}],
        "videos": [],
    }
    client = make_client(lambda request: httpx.Response(200, json={"data": document}))

    zone = client.fetch_zone()

    assert [child.id for child in zone.categories[0].children] == ["b"]
