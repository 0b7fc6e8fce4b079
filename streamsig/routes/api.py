"""
API route definitions for the streamsig service.
"""

import asyncio
import logging

import httpx
from fastapi import APIRouter, HTTPException

from ..config import get_settings
from ..core.http_client import HTTPClient
from ..core.player import get_player_function_set, get_player_functions, normalize_player_url
from ..exceptions import FormatNotFound
from ..formats import resolve_formats, select_format
from ..models.format import ResolvedFormat
from ..models.player import PlayerFunctions
from ..models.request import PlayerFunctionsRequest, ResolveRequest, SelectRequest
from ..models.response import (
    ErrorResponse,
    PlayerFunctionsResponse,
    ResolveResponse,
    TransformFunctionInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_player_functions(player_url: str) -> PlayerFunctions:
    try:
        async with HTTPClient() as http:
            return await get_player_functions(player_url, http)
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch player script {player_url}: {e}")
        raise HTTPException(
            status_code=502,
            detail={
                "success": False,
                "error": f"Could not fetch player script: {e}",
                "error_code": "player.fetch_failed",
            },
        )


@router.post(
    "/player/functions",
    response_model=PlayerFunctionsResponse,
    responses={502: {"model": ErrorResponse, "description": "Player script unavailable"}},
    summary="Extract the decipher and n-transform functions from a player script",
)
async def player_functions(request: PlayerFunctionsRequest):
    functions = await _load_player_functions(request.player_url)
    return PlayerFunctionsResponse(
        player_url=normalize_player_url(request.player_url),
        decipher=(
            None
            if functions.decipher.is_empty
            else TransformFunctionInfo(**functions.decipher._asdict())
        ),
        n_transform=(
            None
            if functions.n_transform.is_empty
            else TransformFunctionInfo(**functions.n_transform._asdict())
        ),
    )


@router.post(
    "/formats/resolve",
    response_model=ResolveResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No streamingData in the player response"},
        502: {"model": ErrorResponse, "description": "Player script unavailable"},
    },
    summary="Repair format URLs of a player response",
    description=(
        "Deciphers signatures and transforms n parameters using the given player "
        "script, then tags every format with capability flags."
    ),
)
async def resolve(request: ResolveRequest):
    functions = PlayerFunctions()
    if request.player_url:
        functions = await _load_player_functions(request.player_url)

    # Script execution is synchronous; keep it off the event loop
    loop = asyncio.get_running_loop()
    formats = await loop.run_in_executor(
        None, resolve_formats, request.info, functions.decipher, functions.n_transform
    )
    if formats is None:
        raise HTTPException(
            status_code=400,
            detail={
                "success": False,
                "error": "Player response has no streamingData",
                "error_code": "formats.no_streaming_data",
            },
        )

    logger.info(f"Resolved {len(formats)} formats")
    return ResolveResponse(
        formats=formats,
        deciphered=not functions.decipher.is_empty,
        n_transformed=not functions.n_transform.is_empty,
    )


@router.post(
    "/formats/select",
    response_model=ResolvedFormat,
    responses={404: {"model": ErrorResponse, "description": "No format matches"}},
    summary="Pick one format by capability and quality",
)
async def select(request: SelectRequest):
    try:
        return select_format(request.formats, request.capability, request.quality)
    except FormatNotFound as e:
        raise HTTPException(
            status_code=404,
            detail={
                "success": False,
                "error": str(e),
                "error_code": e.error_code,
            },
        )


@router.get(
    "/health",
    summary="Health check",
    description="Check the health of the API and the cached player version.",
)
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "base_url": get_settings().base_url,
        "cached_player": get_player_function_set().player_url,
    }
