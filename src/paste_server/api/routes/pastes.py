"""Paste endpoints.

Request bodies are read and decoded by RequestDecoder rather than FastAPI's
body parsing, so malformed input maps to the paste error taxonomy.
"""

from fastapi import APIRouter, Request, Response
from starlette import status

from paste_server.api.dependencies import get_paste_service, get_request_decoder
from paste_server.pastes.models import (
    PasteCreate,
    PasteCreatedResponse,
    PasteDelete,
    PasteUpdate,
    PasteUpdatedResponse,
    PasteView,
    format_timestamp,
)


router = APIRouter()


@router.post(
    "/",
    response_model=PasteCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_paste(request: Request) -> PasteCreatedResponse:
    """Create a paste and return its id and access key."""
    service = get_paste_service(request)
    body = await get_request_decoder(request).decode_request(request, PasteCreate)

    paste = await service.create(body)
    return PasteCreatedResponse(
        id=paste.id,
        access_key=paste.access_key,
        expires_at=format_timestamp(paste.expires_at),
    )


@router.get(
    "/{paste_id}",
    response_model=PasteView,
    response_model_exclude_none=True,
)
async def get_paste(paste_id: str, request: Request) -> PasteView:
    """Return a paste without its access key."""
    paste = await get_paste_service(request).get(paste_id)
    return paste.to_public()


@router.put("/{paste_id}", response_model=PasteUpdatedResponse)
async def update_paste(paste_id: str, request: Request) -> PasteUpdatedResponse:
    """Apply a partial edit authorized by the paste's access key."""
    service = get_paste_service(request)
    body = await get_request_decoder(request).decode_request(request, PasteUpdate)

    paste = await service.edit(paste_id, body)
    return PasteUpdatedResponse(
        id=paste.id,
        expires_at=format_timestamp(paste.expires_at),
    )


@router.delete("/{paste_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_paste(paste_id: str, request: Request) -> Response:
    """Delete a paste authorized by its access key."""
    service = get_paste_service(request)
    body = await get_request_decoder(request).decode_request(request, PasteDelete)

    await service.delete(paste_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
