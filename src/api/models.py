"""Pydantic models shared by all API routers."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response, matching FastAPI's HTTPException format."""

    detail: str = Field(..., description="What went wrong")
