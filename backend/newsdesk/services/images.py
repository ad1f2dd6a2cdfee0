"""Article image proxying with a static fallback."""

from urllib.parse import quote, urlparse

import httpx

from newsdesk.services.types import ProxiedImage

FALLBACK_IMAGE_PATH = "/news.avif"
PROXY_PATH = "/images/proxy"

_DEFAULT_CACHE_CONTROL = "public, max-age=3600, stale-while-revalidate=86400"
_ACCEPT = "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"
_TIMEOUT_SECONDS = 15


def _is_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def image_src(url: str | None) -> str:
    """Return the proxied path for *url*, or the fallback image for missing / non-http URLs."""
    if not url or not _is_http_url(url):
        return FALLBACK_IMAGE_PATH
    return f"{PROXY_PATH}?url={quote(url, safe='')}"


def fetch_image(url: str) -> ProxiedImage | None:
    """Download the image at *url*. Returns None if it cannot be served."""
    if not _is_http_url(url):
        return None
    try:
        response = httpx.get(
            url, headers={"Accept": _ACCEPT}, follow_redirects=True, timeout=_TIMEOUT_SECONDS
        )
    except httpx.HTTPError:
        return None
    if response.is_error:
        return None
    return ProxiedImage(
        content=response.content,
        content_type=response.headers.get("content-type") or "image/jpeg",
        cache_control=response.headers.get("cache-control") or _DEFAULT_CACHE_CONTROL,
    )
