"""FastAPI application that serves a device-appropriate random image."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Header, Query, Request
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse, Response

import randimg
from randimg.config import RandimgConfig
from randimg.devices import classify_user_agent
from randimg.selection import ImageNotFoundError
from randimg.service import ImageService

from .media import info_headers, media_type_for

LOGGER = logging.getLogger(__name__)

REFRESH_PARAM = "refresh_cache"

router = APIRouter(tags=["Images"])


# --- Dependency Injection ---
def get_image_service(request: Request) -> ImageService:
    """Provider for the ImageService bound to the running app."""
    return request.app.state.image_service


def _not_found(message: str) -> PlainTextResponse:
    LOGGER.error("Error: %s", message)
    return PlainTextResponse(f"Image Service Error: {message}", status_code=404)


# --- Endpoints ---
@router.get("/", response_model=None)
def serve_image_endpoint(
    request: Request,
    refresh_cache: Optional[str] = Query(None, description="Set to 1 to clear the metadata cache"),
    device: Optional[str] = Query(None, description="Override device detection"),
    strict: Optional[bool] = Query(None, description="Override strict orientation matching"),
    user_agent: Optional[str] = Header(None),
    service: ImageService = Depends(get_image_service),
) -> Response:
    """
    Stream a random image whose orientation suits the requesting device.
    `?refresh_cache=1` clears the cache and redirects to the same URL without it.
    """
    if refresh_cache == "1":
        service.invalidate()
        target = request.url.remove_query_params(REFRESH_PARAM)
        return RedirectResponse(str(target), status_code=302)

    if device is not None and not service.knows(device):
        LOGGER.warning("Rejected unknown device type %r", device)
        return PlainTextResponse(
            f"Image Service Error: Unknown device type '{device}' "
            f"(expected one of: {', '.join(service.device_types)})",
            status_code=400,
        )
    device_type = device.strip().lower() if device else classify_user_agent(user_agent).value
    LOGGER.info("Detected device: %s", device_type)

    try:
        selection = service.pick(device_type, strict_mode=strict)
    except ImageNotFoundError as exc:
        return _not_found(str(exc))

    if not selection.path.is_file():
        # Removed after validation; the next request rebuilds the cache.
        return _not_found(f"Image no longer available: {selection.path.name}")

    return FileResponse(
        selection.path,
        media_type=media_type_for(selection.path),
        headers=info_headers(selection),
    )


def create_app(config: RandimgConfig, *, service: Optional[ImageService] = None) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.
    """
    version = randimg.__version__
    app = FastAPI(
        title="randimg",
        description="Serves a random image matched to the client's screen orientation.",
        version=version,
    )
    app.state.config = config
    app.state.image_service = service or ImageService.from_config(config)

    app.include_router(router)

    # Health Check
    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok", "version": version}

    return app


__all__ = ["create_app", "get_image_service", "router", "REFRESH_PARAM"]
