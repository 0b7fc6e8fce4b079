from .enums import Capability, Quality
from .format import MimeType, ResolvedFormat
from .player import EMPTY_FUNCTION, PlayerFunctions, TransformFunction
from .request import PlayerFunctionsRequest, ResolveRequest, SelectRequest
from .response import ErrorResponse, PlayerFunctionsResponse, ResolveResponse

__all__ = [
    "EMPTY_FUNCTION",
    "Capability",
    "ErrorResponse",
    "MimeType",
    "PlayerFunctions",
    "PlayerFunctionsRequest",
    "PlayerFunctionsResponse",
    "Quality",
    "ResolveRequest",
    "ResolveResponse",
    "ResolvedFormat",
    "SelectRequest",
    "TransformFunction",
]
