import logging

from ..core.script_engine import ContextSlot, ScriptEngine, get_script_engine
from ..exceptions import InvalidURL, ScriptEngineError
from ..models.player import TransformFunction
from ..utils.helpers import get_query_param, set_query_param

logger = logging.getLogger(__name__)


def ncode(
    url: str,
    function: TransformFunction,
    cache: dict[str, str],
    slot: ContextSlot,
    engine: ScriptEngine | None = None,
) -> str:
    """
    Replace the throttling `n` parameter of `url` with its transformed value.

    `cache` maps raw `n` values to results for the current batch; a cached
    value is substituted without touching the engine. Any failure leaves the
    URL unchanged.
    """
    if function.is_empty:
        return url

    try:
        n = get_query_param(url, "n")
    except InvalidURL as e:
        logger.debug(f"Skipping n transform: {e}")
        return url
    if n is None:
        return url

    result = cache.get(n)
    if result is None:
        engine = engine or get_script_engine()
        try:
            result = engine.execute(slot, function.source, function.source, function.name, n)
        except ScriptEngineError as e:
            logger.warning(f"N transform failed, keeping original URL: {e}")
            return url
        cache[n] = result

    return set_query_param(url, "n", result)
