"""
Pydantic schemas for API responses that are not domain records.
"""
from typing import Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from otel_demo.core.models import NotFound

PROBLEM_JSON = "application/problem+json"


class ProblemDetail(BaseModel):
    """RFC 7807 problem details body."""

    type: str = Field(default="about:blank", description="Problem type URI")
    title: str = Field(..., description="Short summary of the problem")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(default=None, description="Occurrence-specific explanation")
    instance: Optional[str] = Field(default=None, description="URI of the failing request")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "type": "urn:problem-type:item-not-found",
                    "title": "Item not found: unknown-id",
                    "status": 404,
                    "instance": "/api/v1/items/unknown-id",
                }
            ]
        }
    }

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status,
            content=self.model_dump(exclude_none=True),
            media_type=PROBLEM_JSON,
        )


def not_found_response(result: NotFound, instance: str) -> JSONResponse:
    """404 problem response for a missed lookup."""
    return ProblemDetail(
        type=result.problem_type,
        title=result.title or f"Not found: {result.identifier}",
        status=404,
        instance=instance,
    ).to_response()
