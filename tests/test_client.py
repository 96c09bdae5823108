import httpx
import pytest
from pydantic import BaseModel

from jsonfetch.client import JsonClient
from jsonfetch.config.settings import load_settings
from jsonfetch.core.errors import STATUS_UNAVAILABLE, ConfigurationError, RequestBuildError, TransportError


class Point(BaseModel):
    x: int


def _recording_transport(response: httpx.Response | None = None):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response if response is not None else httpx.Response(200, json={"x": 1})

    return httpx.MockTransport(handler), seen


@pytest.mark.parametrize("base_url", ["", "   "])
def test_empty_base_url_fails_construction_without_network(base_url):
    transport, seen = _recording_transport()

    with pytest.raises(ConfigurationError, match='"base_url" is required'):
        JsonClient(base_url, {"X-Api-Key": "k1"}, 5, transport=transport)

    assert seen == []


@pytest.mark.parametrize("base_url", [None, 123])
def test_non_string_base_url_fails_construction(base_url):
    with pytest.raises(ConfigurationError, match='"base_url" is required'):
        JsonClient(base_url)


@pytest.mark.parametrize("timeout_seconds", [0, -1, float("nan")])
def test_non_positive_timeout_fails_construction(timeout_seconds):
    with pytest.raises(ConfigurationError, match="timeout_seconds"):
        JsonClient("https://api.example.test", None, timeout_seconds)


def test_non_ascii_default_header_is_returned_as_failure():
    transport, seen = _recording_transport()
    client = JsonClient("https://api.example.test", {"X-Name": "café"}, 5, transport=transport)

    result = client.get_json("/a")

    assert result.status_code == STATUS_UNAVAILABLE
    assert isinstance(result.error, RequestBuildError)
    assert seen == []


def test_timeout_defaults_to_settings():
    client = JsonClient("https://api.example.test")

    assert client.timeout_seconds == 15


def test_get_json_joins_base_url_path_and_params():
    transport, seen = _recording_transport()
    client = JsonClient("https://api.example.test/v1", transport=transport)

    result = client.get_json("/search", params={"q": "a b"}, into=Point)

    assert result.status_code == 200
    assert result.data.x == 1
    assert str(seen[0].url) == "https://api.example.test/v1/search?q=a%20b"


def test_base_url_and_path_are_concatenated_verbatim():
    client = JsonClient("https://api.example.test/v1")

    assert client.url_for("items") == "https://api.example.test/v1items"
    assert client.url_for("/items") == "https://api.example.test/v1/items"


def test_post_and_put_never_carry_a_query_string():
    transport, seen = _recording_transport()
    client = JsonClient("https://api.example.test", transport=transport)

    client.post_json("/items", body={"name": "lamp"})
    client.put_json("/items/1", body={"name": "desk"})

    assert [r.method for r in seen] == ["POST", "PUT"]
    assert all(r.url.query == b"" for r in seen)


def test_delete_json_carries_params():
    transport, seen = _recording_transport(httpx.Response(204))
    client = JsonClient("https://api.example.test", transport=transport)

    result = client.delete_json("/items/1", params={"hard": "true"})

    assert result.ok
    assert result.status_code == 204
    assert str(seen[0].url) == "https://api.example.test/items/1?hard=true"


def test_default_headers_are_sent_and_overridable_per_call():
    transport, seen = _recording_transport()
    client = JsonClient(
        "https://api.example.test",
        {"X-Api-Key": "default", "X-Tenant": "acme"},
        transport=transport,
    )

    client.get_json("/a")
    client.get_json("/b", headers={"x-api-key": "override", "Content-Type": "text/plain"})
    client.get_json("/c")

    first, second, third = seen
    assert first.headers["X-Api-Key"] == "default"
    assert second.headers["X-Api-Key"] == "override"
    assert second.headers["X-Tenant"] == "acme"
    assert second.headers["Content-Type"] == "application/json"
    assert second.headers["Accept"] == "application/json"
    # The override did not stick to the handle.
    assert third.headers["X-Api-Key"] == "default"
    assert client.default_headers == {"X-Api-Key": "default", "X-Tenant": "acme"}


def test_default_headers_are_copied_at_construction():
    headers = {"X-Api-Key": "k1"}
    client = JsonClient("https://api.example.test", headers)

    headers["X-Api-Key"] = "changed"
    client.default_headers["X-Api-Key"] = "changed-again"

    assert client.default_headers == {"X-Api-Key": "k1"}


def test_handle_timeout_is_applied_to_requests():
    transport, seen = _recording_transport()
    client = JsonClient("https://api.example.test", None, 2.5, transport=transport)

    client.get_json("/items")

    assert seen[0].extensions["timeout"]["read"] == 2.5


def test_unreachable_host_returns_sentinel_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    client = JsonClient("https://nowhere.example.test", transport=httpx.MockTransport(handler))

    result = client.post_json("/items", body={"name": "lamp"})

    assert result.status_code == STATUS_UNAVAILABLE
    assert isinstance(result.error, TransportError)
    assert result.error.context["url"] == "https://nowhere.example.test/items"


def test_from_settings_uses_configured_headers_and_timeout(tmp_path):
    config = tmp_path / "jsonfetch.yaml"
    config.write_text(
        "http:\n"
        "  timeout_seconds: 7\n"
        "  user_agent: acme-sync/2.0\n"
        "  default_headers:\n"
        "    X-Api-Version: 3\n",
        encoding="utf-8",
    )
    settings = load_settings(config)
    transport, seen = _recording_transport()

    client = JsonClient.from_settings("https://api.example.test", settings, transport=transport)
    client.get_json("/items")

    assert client.timeout_seconds == 7
    assert client.default_headers == {"User-Agent": "acme-sync/2.0", "X-Api-Version": "3"}
    assert seen[0].headers["User-Agent"] == "acme-sync/2.0"
    assert seen[0].headers["X-Api-Version"] == "3"


def test_repr_omits_headers():
    client = JsonClient("https://api.example.test", {"Authorization": "Bearer secret"}, 5)

    assert "secret" not in repr(client)
    assert "https://api.example.test" in repr(client)
