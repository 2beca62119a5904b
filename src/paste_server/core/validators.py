"""Annotated Pydantic types shared by the settings models."""

from typing import Annotated

from pydantic import Field


__all__ = [
    "Port",
    "ExpiryDays",
]


Port = Annotated[int, Field(ge=1, le=65535, description="TCP/UDP port number")]
ExpiryDays = Annotated[int, Field(ge=1, description="Lifetime in whole days")]
