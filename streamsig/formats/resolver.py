"""
Turn the raw `streamingData` format lists of a player response into
validated, playable ResolvedFormat records.
"""

import logging
import re
from typing import Any

from pydantic import ValidationError

from ..core.script_engine import ContextSlot, ScriptEngine
from ..models.format import ResolvedFormat
from ..models.player import EMPTY_FUNCTION, TransformFunction
from ..utils.helpers import traverse_obj
from .cipher import decipher
from .ncode import ncode

logger = logging.getLogger(__name__)

_IS_LIVE_RE = re.compile(r"\bsource[/=]yt_live_broadcast\b")
_IS_HLS_RE = re.compile(r"/manifest/hls_(variant|playlist)/")
_IS_DASH_MPD_RE = re.compile(r"/manifest/dash/")

_CIPHER_FIELDS = ("signatureCipher", "cipher")


class _Batch:
    """Per-call transform state: one context slot per role and one n-value cache."""

    def __init__(
        self,
        decipher_function: TransformFunction,
        n_function: TransformFunction,
        engine: ScriptEngine | None,
    ):
        self.decipher_function = decipher_function
        self.n_function = n_function
        self.engine = engine
        self.cipher_slot = ContextSlot()
        self.n_slot = ContextSlot()
        self.n_cache: dict[str, str] = {}

    def download_url(self, fmt: dict[str, Any]) -> Any:
        """Return the repaired URL, or the raw value when it is not a string."""
        url = fmt.get("url")
        if url:
            if not isinstance(url, str):
                return url
            return ncode(url, self.n_function, self.n_cache, self.n_slot, self.engine)

        cipher_query = fmt.get("signatureCipher") or fmt.get("cipher") or ""
        if not isinstance(cipher_query, str):
            return None
        url = decipher(cipher_query, self.decipher_function, self.cipher_slot, self.engine)
        return ncode(url, self.n_function, self.n_cache, self.n_slot, self.engine)


def add_format_meta(fmt: dict[str, Any]) -> dict[str, Any]:
    """Derive capability and delivery flags from a format's fields and URL."""
    url = fmt.get("url")
    if not isinstance(url, str):
        url = ""
    fmt["hasVideo"] = "qualityLabel" in fmt
    fmt["hasAudio"] = "audioBitrate" in fmt or "audioQuality" in fmt
    fmt["isLive"] = bool(_IS_LIVE_RE.search(url))
    fmt["isHLS"] = bool(_IS_HLS_RE.search(url))
    fmt["isDashMPD"] = bool(_IS_DASH_MPD_RE.search(url))
    return fmt


def resolve_formats(
    info: dict[str, Any],
    decipher_function: TransformFunction = EMPTY_FUNCTION,
    n_function: TransformFunction = EMPTY_FUNCTION,
    engine: ScriptEngine | None = None,
) -> list[ResolvedFormat] | None:
    """
    Resolve every format of a player response.

    Returns None when `info` has no `streamingData`. Records that fail
    validation after resolution are dropped; one bad record never aborts the
    batch. The input records are not modified.
    """
    streaming_data = traverse_obj(info, "streamingData")
    if not isinstance(streaming_data, dict):
        return None

    raw_formats = []
    for key in ("formats", "adaptiveFormats"):
        entries = traverse_obj(streaming_data, key)
        if isinstance(entries, list):
            raw_formats.extend(entries)

    batch = _Batch(decipher_function, n_function, engine)
    resolved: list[ResolvedFormat] = []

    for raw in raw_formats:
        if not isinstance(raw, dict):
            logger.debug(f"Dropping non-object format entry: {raw!r}")
            continue

        fmt = dict(raw)
        url = batch.download_url(fmt)
        for field in _CIPHER_FIELDS:
            fmt.pop(field, None)
        if not url:
            logger.debug(f"Dropping format itag={fmt.get('itag')} without a URL")
            continue
        fmt["url"] = url
        add_format_meta(fmt)

        try:
            resolved.append(ResolvedFormat.model_validate(fmt))
        except ValidationError as e:
            logger.debug(f"Dropping malformed format itag={fmt.get('itag')}: {e.error_count()} errors")

    logger.debug(f"Resolved {len(resolved)} of {len(raw_formats)} formats")
    return resolved
