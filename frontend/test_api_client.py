# frontend/test_api_client.py
# Unit tests for the backend API client (requests is stubbed, no server needed)

import pytest
import requests

from frontend import api_client
from frontend.api_client import ApiError
from frontend.config import validate_api_url


class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text
        self.reason = ""

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


@pytest.fixture
def calls(monkeypatch):
    """Record outgoing requests; tests set `calls.response` to control replies."""

    class Recorder(list):
        response = FakeResponse(200, [])

    recorder = Recorder()

    def fake(method):
        def _send(url, **kwargs):
            recorder.append((method, url, kwargs))
            if isinstance(recorder.response, Exception):
                raise recorder.response
            return recorder.response
        return _send

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(api_client.requests, method, fake(method))
    monkeypatch.setattr(api_client, "get_api_base_url", lambda: "http://backend.test")
    return recorder


def test_list_assets_builds_query_like_the_ui(calls):
    """Empty search and category "all" are not sent."""
    calls.response = FakeResponse(200, [{"id": 1}])
    assert api_client.list_assets(search="", category="all", sort="value-high") == [{"id": 1}]
    method, url, kwargs = calls[0]
    assert (method, url) == ("get", "http://backend.test/api/assets")
    assert kwargs["params"] == {"sort": "value-high"}


def test_list_assets_without_filters_sends_no_params(calls):
    api_client.list_assets()
    assert calls[0][2]["params"] is None


def test_get_asset_404_returns_none(calls):
    calls.response = FakeResponse(404, {"detail": "Asset not found"})
    assert api_client.get_asset(7) is None
    assert calls[0][1] == "http://backend.test/api/assets/7"


def test_create_asset_expects_201(calls):
    calls.response = FakeResponse(201, {"id": 3, "name": "Desk"})
    assert api_client.create_asset({"name": "Desk"}) == {"id": 3, "name": "Desk"}
    method, url, kwargs = calls[0]
    assert method == "post"
    assert kwargs["json"] == {"name": "Desk"}


def test_validation_error_raises_api_error_with_detail(calls):
    calls.response = FakeResponse(400, {"detail": "estimatedValue: Input should be greater than or equal to 0"})
    with pytest.raises(ApiError) as exc_info:
        api_client.create_asset({"estimatedValue": -1})
    assert exc_info.value.status_code == 400
    assert "estimatedValue" in exc_info.value.detail


def test_non_json_error_body_is_reported(calls):
    calls.response = FakeResponse(502, None, text="Bad Gateway")
    with pytest.raises(ApiError) as exc_info:
        api_client.get_summary()
    assert exc_info.value.detail == "Bad Gateway"


def test_analyze_photo_sends_multipart_image(calls):
    calls.response = FakeResponse(200, {"imageUrl": "data:image/png;base64,YWJj", "imageData": "YWJj", "analysis": {}})
    result = api_client.analyze_photo("photo.png", b"abc", "image/png")
    assert result["imageData"] == "YWJj"
    method, url, kwargs = calls[0]
    assert url == "http://backend.test/api/assets/analyze"
    assert kwargs["files"] == {"image": ("photo.png", b"abc", "image/png")}


def test_update_asset_uses_put(calls):
    calls.response = FakeResponse(200, {"id": 1, "estimatedValue": 6000})
    api_client.update_asset(1, {"estimatedValue": 6000})
    assert calls[0][0] == "put"
    assert calls[0][2]["json"] == {"estimatedValue": 6000}


@pytest.mark.parametrize("status, expected", [(204, True), (404, False)])
def test_delete_asset(calls, status, expected):
    calls.response = FakeResponse(status)
    assert api_client.delete_asset(1) is expected


def test_delete_asset_server_error_raises(calls):
    calls.response = FakeResponse(500, {"detail": "Failed to delete asset"})
    with pytest.raises(ApiError):
        api_client.delete_asset(1)


@pytest.mark.parametrize("error", [requests.exceptions.ConnectionError(), requests.exceptions.Timeout()])
def test_transport_failures_return_none(calls, error):
    calls.response = error
    assert api_client.get_summary() is None
    assert api_client.delete_asset(1) is None


def test_configuration_error_returns_none(monkeypatch):
    def broken():
        raise RuntimeError("Backend URL not configured")

    monkeypatch.setattr(api_client, "get_api_base_url", broken)
    assert api_client.api_request("GET", "/api/assets") is None


def test_unsupported_method_raises(calls):
    with pytest.raises(ValueError):
        api_client.api_request("PATCH", "/api/assets/1")


class TestValidateApiUrl:
    def test_local_allows_http_localhost(self):
        validate_api_url("http://127.0.0.1:8000", "local")

    def test_production_requires_https(self):
        with pytest.raises(ValueError):
            validate_api_url("http://api.example.com", "production")

    def test_production_rejects_localhost(self):
        with pytest.raises(ValueError):
            validate_api_url("https://localhost:8000", "production")

    def test_empty_url_rejected(self):
        with pytest.raises(ValueError):
            validate_api_url("", "local")
