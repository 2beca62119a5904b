"""Helpers that fetch shared components from application state."""

from typing import cast

from fastapi import HTTPException, Request
from starlette import status

from paste_server.pastes import PasteService, RequestDecoder


def get_paste_service(request: Request) -> PasteService:
    """Get the paste service from app state.

    Raises:
        HTTPException: If the service is not initialized
    """
    service = getattr(request.app.state, "paste_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Paste service not initialized",
        )
    return cast(PasteService, service)


def get_request_decoder(request: Request) -> RequestDecoder:
    """Get the request body decoder from app state."""
    decoder = getattr(request.app.state, "request_decoder", None)
    if decoder is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Paste service not initialized",
        )
    return cast(RequestDecoder, decoder)
