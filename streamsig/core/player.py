"""
Player script handling: locate the player script, extract the decipher and
n-transform functions from it, and cache the result per player version.

Extraction is driven by literal anchors that match the current shape of the
minified player. When the player changes shape a role simply goes missing
and is treated as an identity transform downstream; update the anchors
below when that happens.
"""

import asyncio
import logging
import re
from urllib.parse import urljoin, urlsplit, urlunsplit

from ..config import get_settings
from ..exceptions import ExtractionMiss
from ..models.player import EMPTY_FUNCTION, PlayerFunctions, TransformFunction
from .http_client import HTTPClient
from .js_scanner import between, cut_after_js
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

# Anchors around the decipher call site: c&&(c=NAME(decodeURIComponent(c))
_DECIPHER_NAME_LEFT = 'a.set("alr","yes");c&&(c='
_DECIPHER_NAME_RIGHT = "(decodeURIC"

# The decipher body starts with a=a.split("");OBJ.method(a,N)...
_MANIPULATIONS_LEFT = 'a=a.split("");'
_MANIPULATIONS_RIGHT = "."

# Anchors around the n-transform call site: &&(b=NAME(b) or &&(b=ARR[0](b)
_NCODE_NAME_LEFT = '&&(b=a.get("n"))&&(b='
_NCODE_NAME_RIGHT = "(b)"

_PLAYER_URL_PATTERNS = [
    r'"(?:PLAYER_JS_URL|jsUrl)"\s*:\s*"([^"]+)"',
    r'<script\s+src="([^"]+)"(?:\s+type="text\\?/javascript")?\s+name="player_ias\\?/base"\s*>',
    r"/s/player/[a-zA-Z0-9_-]+/[^\"']+/base\.js",
]


def find_player_url(page: str) -> str | None:
    """Find the player script reference in a watch or embed page."""
    for pattern in _PLAYER_URL_PATTERNS:
        match = re.search(pattern, page)
        if match:
            ref = match.group(1) if match.groups() else match.group(0)
            return ref.replace("\\/", "/")
    return None


def normalize_player_url(ref: str) -> str:
    """Resolve a player reference against the base URL and drop its query string."""
    parts = urlsplit(urljoin(get_settings().base_url + "/", ref))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def _extract_definition(body: str, function_name: str) -> str:
    """Return `NAME=function(a){...}` for `function_name` as defined in `body`."""
    function_start = f"{function_name}=function(a)"
    ndx = body.find(function_start)
    if ndx == -1:
        raise ExtractionMiss(f"Definition of {function_name} not found")

    function_body = cut_after_js(body[ndx + len(function_start) :])
    if function_body is None:
        raise ExtractionMiss(f"Body of {function_name} is not balanced")
    return f"{function_start}{function_body}"


def _extract_manipulations(body: str, caller: str) -> str:
    object_name = between(caller, _MANIPULATIONS_LEFT, _MANIPULATIONS_RIGHT)
    if not object_name:
        return ""

    object_start = f"var {object_name}={{"
    ndx = body.find(object_start)
    if ndx == -1:
        return ""

    # Keep the opening brace so the scanner starts on it
    object_body = cut_after_js(body[ndx + len(object_start) - 1 :])
    if object_body is None:
        return ""
    return f"var {object_name}={object_body}"


def extract_decipher(body: str) -> TransformFunction:
    function_name = between(body, _DECIPHER_NAME_LEFT, _DECIPHER_NAME_RIGHT)
    if not function_name:
        raise ExtractionMiss("Decipher function name not found")

    function_body = f"var {_extract_definition(body, function_name)}"
    manipulations = _extract_manipulations(body, function_body)
    source = f"{manipulations};{function_body};".replace("\n", "")
    return TransformFunction(function_name, source)


def extract_ncode(body: str) -> TransformFunction:
    function_name = between(body, _NCODE_NAME_LEFT, _NCODE_NAME_RIGHT)
    if "[" in function_name:
        array_name = function_name.split("[", 1)[0]
        function_name = between(body, f"var {array_name}=[", "]")
    if not function_name:
        raise ExtractionMiss("N-transform function name not found")

    source = f"var {_extract_definition(body, function_name)};".replace("\n", "")
    return TransformFunction(function_name, source)


def extract_functions(body: str) -> PlayerFunctions:
    """
    Extract the decipher and n-transform functions from a player script.

    Each role is extracted independently; a role that cannot be found is
    returned as EMPTY_FUNCTION so that positions never shift.
    """
    functions = []
    for role, extractor in (("decipher", extract_decipher), ("n-transform", extract_ncode)):
        try:
            function = extractor(body)
            logger.debug(f"Extracted {role} function {function.name} ({len(function.source)} chars)")
        except ExtractionMiss as e:
            logger.debug(f"No {role} function in player script: {e}")
            function = EMPTY_FUNCTION
        functions.append(function)
    return PlayerFunctions(*functions)


class PlayerFunctionSet:
    """
    Process-wide, single-entry cache of extracted player functions.

    Lifecycle: empty at start, populated on the first lookup, replaced
    wholesale whenever a different player URL is requested. Lookups share a
    read lock. Refreshes are serialized, so concurrent misses for one player
    fetch it once, and the swap itself takes the write lock. Fetch errors
    propagate to the caller without retry.
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._refresh_lock = asyncio.Lock()
        self._player_url: str | None = None
        self._functions: PlayerFunctions | None = None

    @property
    def player_url(self) -> str | None:
        return self._player_url

    async def get(self, player_ref: str, http: HTTPClient) -> PlayerFunctions:
        player_url = normalize_player_url(player_ref)

        functions = await self._lookup(player_url)
        if functions is not None:
            return functions

        # One refresh at a time; waiters re-check once the previous one lands
        async with self._refresh_lock:
            functions = await self._lookup(player_url)
            if functions is not None:
                return functions

            body = await http.get_text(player_url)
            functions = extract_functions(body)

            async with self._lock.write():
                self._player_url = player_url
                self._functions = functions
            logger.info(f"Player functions refreshed for {player_url}")
        return functions

    async def _lookup(self, player_url: str) -> PlayerFunctions | None:
        async with self._lock.read():
            if self._player_url == player_url:
                return self._functions
        return None

    async def clear(self):
        async with self._lock.write():
            self._player_url = None
            self._functions = None


_player_functions: PlayerFunctionSet | None = None


def get_player_function_set() -> PlayerFunctionSet:
    global _player_functions
    if _player_functions is None:
        _player_functions = PlayerFunctionSet()
    return _player_functions


async def get_player_functions(player_ref: str, http: HTTPClient) -> PlayerFunctions:
    """Return the (decipher, n_transform) pair for a player, fetching on a cache miss."""
    return await get_player_function_set().get(player_ref, http)
