"""
Passthrough endpoint to the upstream text model.

POST {"prompt": "..."} is forwarded with the server's credential; the
caller never sees the key. Error bodies are {"error": ..., ["details": ...]}.
"""

import json
import logging
import secrets

import httpx
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from chefgenie.config import ChefGenieSettings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])

OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE"]


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def check_function_secret(
    authorization: str | None = Header(None),
    settings: ChefGenieSettings = Depends(get_settings),
) -> JSONResponse | None:
    """
    Validate the caller's bearer secret when one is configured.

    Returns an error response to send instead, or None to proceed.
    """
    if not settings.function_secret:
        return None

    if not authorization or not authorization.startswith("Bearer "):
        return _error(401, "Missing bearer credential")

    token = authorization[7:]  # Remove "Bearer " prefix
    if not secrets.compare_digest(token.encode(), settings.function_secret.encode()):
        return _error(401, "Invalid bearer credential")

    return None


def get_http_client() -> httpx.AsyncClient:
    """HTTP client for the upstream call (overridden in tests)."""
    return httpx.AsyncClient()


@router.post("/api/generate")
async def generate(
    request: Request,
    auth_error: JSONResponse | None = Depends(check_function_secret),
    settings: ChefGenieSettings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """Forward a prompt to the upstream model and return its JSON."""
    if auth_error is not None:
        return auth_error

    try:
        raw = await request.body()
        body = json.loads(raw) if raw else {}
    except ValueError as e:
        logger.error(f"Function error: {e}")
        return _error(500, "Internal server error")

    prompt = body.get("prompt") if isinstance(body, dict) else None
    if not prompt:
        return _error(400, "Missing prompt in request body")

    if not settings.openai_api_key:
        return _error(500, "Server misconfigured: OPENAI_API_KEY not set")

    payload = {
        "model": settings.proxy_model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": settings.proxy_max_output_tokens,
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.openai_api_key}",
    }

    try:
        async with http_client as client:
            upstream = await client.post(
                settings.proxy_upstream_url,
                json=payload,
                headers=headers,
                timeout=settings.proxy_timeout_seconds,
            )
    except httpx.HTTPError as e:
        logger.error(f"Function error: {e}")
        return _error(500, "Internal server error")

    if upstream.is_error:
        logger.warning(f"Upstream returned {upstream.status_code}")
        return _error(upstream.status_code, "Generative API error", details=upstream.text)

    try:
        data = upstream.json()
    except ValueError as e:
        logger.error(f"Function error: {e}")
        return _error(500, "Internal server error")

    return {"data": data}


@router.api_route("/api/generate", methods=OTHER_METHODS, include_in_schema=False)
async def generate_method_not_allowed():
    return JSONResponse(
        status_code=405,
        content={"error": "Method not allowed"},
        headers={"Allow": "POST"},
    )
