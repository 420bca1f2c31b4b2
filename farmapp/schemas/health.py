"""Health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"]
    version: str
    database: Literal["connected", "disconnected"]
    ai_features_enabled: bool = Field(description="Whether the /ai routes accept requests")
