import logging

from ..core.script_engine import ContextSlot, ScriptEngine, get_script_engine
from ..exceptions import InvalidURL, ScriptEngineError
from ..models.player import TransformFunction
from ..utils.helpers import parse_query, set_query_param

logger = logging.getLogger(__name__)

_DEFAULT_SIGNATURE_PARAM = "signature"


def decipher(
    cipher_query: str,
    function: TransformFunction,
    slot: ContextSlot,
    engine: ScriptEngine | None = None,
) -> str:
    """
    Turn a `url=...&s=...&sp=...` cipher bundle into a signed URL.

    Returns `cipher_query` unchanged when there is no decipher function or
    the bundle lacks `url` or `s`. When the engine fails or the URL does not
    parse, the unsigned `url` is returned instead.
    """
    if function.is_empty:
        return cipher_query

    args = parse_query(cipher_query)
    url = args.get("url")
    ciphered = args.get("s")
    if not url or ciphered is None:
        return cipher_query

    engine = engine or get_script_engine()
    query_name = args.get("sp") or _DEFAULT_SIGNATURE_PARAM

    try:
        signature = engine.execute(slot, function.source, function.source, function.name, ciphered)
        return set_query_param(url, query_name, signature)
    except (ScriptEngineError, InvalidURL) as e:
        logger.warning(f"Signature decipher failed, keeping unsigned URL: {e}")
        return url
