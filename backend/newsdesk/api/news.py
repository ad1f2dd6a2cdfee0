"""News and article image endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import RedirectResponse, Response

from newsdesk.services.images import FALLBACK_IMAGE_PATH, fetch_image, image_src
from newsdesk.services.news import NewsClient

router = APIRouter()


@router.get("/news")
def list_news(
    q: str | None = Query(default=None),
    date: str | None = Query(default=None),
) -> dict[str, Any]:
    try:
        payload = NewsClient().fetch(q, from_date=date)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    for article in payload["articles"]:
        if isinstance(article, dict):
            article["image_src"] = image_src(article.get("urlToImage"))
    return payload


@router.get("/images/proxy", response_model=None)
def proxy_image(url: str | None = Query(default=None)) -> Response:
    image = fetch_image(url) if url else None
    if image is None:
        return RedirectResponse(url=FALLBACK_IMAGE_PATH, status_code=307)
    return Response(
        content=image["content"],
        media_type=image["content_type"],
        headers={"Cache-Control": image["cache_control"]},
    )
