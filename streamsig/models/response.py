from pydantic import BaseModel, Field

from .format import ResolvedFormat


class TransformFunctionInfo(BaseModel):
    name: str = Field(..., description="Function name inside the fragment")
    source: str = Field(..., description="Self-contained script fragment")


class PlayerFunctionsResponse(BaseModel):
    """Response model for the /player/functions endpoint."""

    success: bool = Field(True)
    player_url: str = Field(..., description="Normalized player script URL")
    decipher: TransformFunctionInfo | None = Field(None, description="Signature decipher function")
    n_transform: TransformFunctionInfo | None = Field(None, description="n parameter transform")


class ResolveResponse(BaseModel):
    """Response model for the /formats/resolve endpoint."""

    success: bool = Field(True)
    formats: list[ResolvedFormat] = Field(default_factory=list, description="Resolved formats")
    deciphered: bool = Field(False, description="Whether a decipher function was available")
    n_transformed: bool = Field(False, description="Whether an n transform was available")


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = Field(False)
    error: str = Field(..., description="Error message")
    error_code: str | None = Field(None, description="Machine-readable error code")
