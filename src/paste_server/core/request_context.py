"""Minimal request context for tracking request IDs."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RequestContext:
    """Request ID and basic metadata shared by the middleware stack."""

    request_id: str
    method: str = ""
    path: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, **kwargs: Any) -> None:
        self.metadata.update(kwargs)
