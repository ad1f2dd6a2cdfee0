"""Supabase connection settings read from the environment."""

import os
from urllib.parse import urlparse

# Older deployments used different names for the service-role key.
_SERVICE_ROLE_ENV_VARS = (
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPERBASE_SERVICE_ROLE_KEY",
    "SUPABASE_SECRET_KEY",
    "SUPABASE_SERVICE_ROLE",
)


def get_supabase_url() -> str:
    """Return SUPABASE_URL without a trailing slash.

    Raises RuntimeError if it is unset or not an http(s) URL.
    """
    raw = os.environ.get("SUPABASE_URL", "").strip()
    if not raw:
        raise RuntimeError("SUPABASE_URL environment variable is not set")
    parsed = urlparse(raw)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise RuntimeError(f"SUPABASE_URL is not a valid URL: {raw!r}")
    return raw.rstrip("/")


def get_anon_key() -> str:
    key = os.environ.get("SUPABASE_ANON_KEY", "").strip()
    if not key:
        raise RuntimeError("SUPABASE_ANON_KEY environment variable is not set")
    return key


def get_service_role_key() -> str:
    for name in _SERVICE_ROLE_ENV_VARS:
        key = os.environ.get(name, "").strip()
        if key:
            return key
    raise RuntimeError(
        "SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_SECRET_KEY / SUPABASE_SERVICE_ROLE) is not set"
    )
