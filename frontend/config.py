# frontend/config.py
# Environment-aware configuration for AssetSnap API clients

import os
from typing import Literal

# Environment detection - normalize to lowercase
_raw_env = os.environ.get("ENV", "local").lower()
ENV: Literal["local", "staging", "production"] = _raw_env if _raw_env in ("local", "staging", "production") else "local"  # type: ignore

# Environment flags (using normalized ENV)
IS_LOCAL = (ENV == "local")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "production")

# Legacy alias
IS_DEV = IS_LOCAL

LOCAL_API_URL = "http://127.0.0.1:8000"


def validate_api_url(url: str, env: str) -> None:
    """
    Validate API base URL according to environment security rules.

    Args:
        url: The API base URL to validate
        env: Current environment ("local", "staging", "production")

    Raises:
        ValueError: If URL violates security constraints for the environment
    """
    if not url:
        raise ValueError("API base URL cannot be empty")

    # Production/staging must use HTTPS and never localhost
    if env in ("staging", "production"):
        if not url.startswith("https://"):
            raise ValueError(f"Production/staging must use HTTPS. Got: {url}")
        if "127.0.0.1" in url or "localhost" in url:
            raise ValueError(f"Production/staging cannot use localhost URLs. Got: {url}")


def get_api_base_url() -> str:
    """
    Get API base URL with strict priority and validation.

    Priority:
    1. BACKEND_URL environment variable
    2. API_BASE_URL environment variable
    3. Local default (http://127.0.0.1:8000) ONLY if ENV == "local"
    4. Raise error if production/staging with no configured URL

    Returns:
        Validated API base URL with trailing slash removed

    Raises:
        RuntimeError: If production/staging environment has no configured URL
        ValueError: If the configured URL fails validation
    """
    for var in ("BACKEND_URL", "API_BASE_URL"):
        configured = os.environ.get(var, "").strip()
        if configured:
            url = configured.rstrip("/")
            validate_api_url(url, ENV)
            return url

    if ENV == "local":
        return LOCAL_API_URL

    raise RuntimeError(
        f"Backend URL not configured for {ENV.upper()} environment. "
        f"Set BACKEND_URL to the backend service URL. "
        f"Production/staging MUST use HTTPS and cannot fall back to localhost."
    )
