from typing import Any

from pydantic import BaseModel, Field

from .enums import Capability, Quality
from .format import ResolvedFormat


class PlayerFunctionsRequest(BaseModel):
    """Request model for the /player/functions endpoint."""

    player_url: str = Field(
        ...,
        max_length=2048,
        description="Player script URL or path",
        examples=["/s/player/6d1c1f31/player_ias.vflset/en_US/base.js"],
    )


class ResolveRequest(BaseModel):
    """Request model for the /formats/resolve endpoint."""

    info: dict[str, Any] = Field(
        ...,
        description="Player response containing a streamingData section",
    )
    player_url: str | None = Field(
        default=None,
        max_length=2048,
        description="Player script used to decipher signatures and n parameters",
    )


class SelectRequest(BaseModel):
    """Request model for the /formats/select endpoint."""

    formats: list[ResolvedFormat] = Field(..., description="Resolved formats to choose from")
    capability: Capability = Field(
        default=Capability.DEFAULT,
        description="Which streams qualify: audio, video, or audioandvideo",
    )
    quality: Quality = Field(
        default=Quality.HIGHEST,
        description="Ranking policy",
    )
