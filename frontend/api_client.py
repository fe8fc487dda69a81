"""
frontend/api_client.py
Centralized API client for the AssetSnap backend.

This module ensures:
1. One place builds URLs from the configured base URL (local/staging/prod)
2. Transport failures (timeout, connection refused) never raise: callers get None
3. HTTP errors other than 404 raise ApiError with the server's detail message
4. No duplicate request logic scattered across scripts and UIs
"""

from typing import Any, Dict, List, Literal, Optional, Tuple

import requests

# Import config (robust fallback for different run contexts)
try:
    from frontend.config import get_api_base_url, IS_DEV
except ModuleNotFoundError:
    from config import get_api_base_url, IS_DEV


__all__ = [
    "ApiError",
    "api_request",
    "list_assets",
    "get_asset",
    "analyze_photo",
    "create_asset",
    "update_asset",
    "delete_asset",
    "get_summary",
]


class ApiError(Exception):
    """Backend answered with an error status (other than 404)."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def api_request(
    method: Literal["GET", "POST", "PUT", "DELETE"],
    path: str,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None,
    timeout: int = 20,
) -> Optional[requests.Response]:
    """
    Make an API request against the configured backend.

    This is the ONLY function that should make backend API calls.

    Args:
        method: HTTP method (GET, POST, PUT, DELETE)
        path: API endpoint path (e.g., "/api/assets")
        json: JSON body for POST/PUT requests
        params: Query parameters
        files: Multipart files for POST (e.g., {"image": (name, bytes, mime)})
        timeout: Request timeout in seconds (default: 20)

    Returns:
        Response object for any HTTP status, None on config/connection error
    """
    try:
        base_url = get_api_base_url()
    except (RuntimeError, ValueError) as e:
        print(f"[API] Configuration error: {e}")
        return None

    url = f"{base_url}{path}"
    headers = {"Accept": "application/json"}

    try:
        if method == "GET":
            resp = requests.get(url, headers=headers, params=params, timeout=timeout)
        elif method == "POST":
            resp = requests.post(url, json=json, files=files, headers=headers, params=params, timeout=timeout)
        elif method == "PUT":
            resp = requests.put(url, json=json, headers=headers, params=params, timeout=timeout)
        elif method == "DELETE":
            resp = requests.delete(url, headers=headers, params=params, timeout=timeout)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")
    except requests.exceptions.Timeout:
        print(f"[API] Timeout after {timeout}s on {method} {path}")
        return None
    except requests.exceptions.ConnectionError:
        print(f"[API] Cannot connect to backend at {base_url} ({method} {path})")
        return None

    if IS_DEV:
        print(f"[API] {method} {path} -> {resp.status_code}")
    return resp


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason or "Unknown error"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return str(body)[:200]


def _json_or_none(resp: Optional[requests.Response], ok: Tuple[int, ...] = (200,)) -> Any:
    """Parsed body on success, None on 404/transport failure, ApiError otherwise."""
    if resp is None:
        return None
    if resp.status_code in ok:
        return resp.json()
    if resp.status_code == 404:
        return None
    raise ApiError(resp.status_code, _error_detail(resp))


def list_assets(
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort: Optional[str] = None,
) -> Optional[List[Dict[str, Any]]]:
    """List assets; empty search and category "all" are not sent."""
    params: Dict[str, Any] = {}
    if search:
        params["search"] = search
    if category and category != "all":
        params["category"] = category
    if sort:
        params["sort"] = sort
    return _json_or_none(api_request("GET", "/api/assets", params=params or None))


def get_asset(asset_id: int) -> Optional[Dict[str, Any]]:
    return _json_or_none(api_request("GET", f"/api/assets/{asset_id}"))


def analyze_photo(filename: str, content: bytes, content_type: str = "image/jpeg") -> Optional[Dict[str, Any]]:
    """
    Upload a photo for analysis.

    Returns:
        {"imageUrl", "imageData", "analysis": {"name", "category", "estimatedValue", "confidence"}}
    """
    resp = api_request(
        "POST",
        "/api/assets/analyze",
        files={"image": (filename, content, content_type)},
        timeout=60,
    )
    return _json_or_none(resp)


def create_asset(fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Create an asset from camelCase fields; returns the stored record."""
    return _json_or_none(api_request("POST", "/api/assets", json=fields), ok=(201,))


def update_asset(asset_id: int, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _json_or_none(api_request("PUT", f"/api/assets/{asset_id}", json=patch))


def delete_asset(asset_id: int) -> Optional[bool]:
    """
    Delete an asset.

    Returns:
        True if deleted, False if it did not exist, None on transport failure
    """
    resp = api_request("DELETE", f"/api/assets/{asset_id}")
    if resp is None:
        return None
    if resp.status_code == 204:
        return True
    if resp.status_code == 404:
        return False
    raise ApiError(resp.status_code, _error_detail(resp))


def get_summary() -> Optional[Dict[str, Any]]:
    """{"totalItems", "totalValue", "avgValue", "categories"}"""
    return _json_or_none(api_request("GET", "/api/assets/stats/summary"))
