"""Health check endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from paste_server import __version__


router = APIRouter()


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status")
    version: str = Field(description="Running paste-server version")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
