"""
Sandboxed execution of extracted player functions.

Fragments are compiled into a dukpy (Duktape) interpreter. A ContextSlot
holds at most one compiled interpreter, keyed by the exact source text it
was compiled from, so that a batch of formats sharing one fragment compiles
it once. Arguments cross into JavaScript through dukpy's own marshalling
(the `dukpy` global object) and are never formatted into source text.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

import dukpy

from ..exceptions import ScriptCompileError, ScriptEvalError, ScriptResultTypeError

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][\w$]*$")


@dataclass
class EngineContext:
    """A compiled interpreter bound to the fragment it was compiled from."""

    identity: str
    interpreter: Any


@dataclass
class ContextSlot:
    """Single-slot holder for the most recently compiled EngineContext."""

    context: EngineContext | None = None

    def matches(self, fragment_id: str) -> bool:
        return self.context is not None and self.context.identity == fragment_id

    def clear(self):
        self.context = None


class ScriptEngine:
    """Compiles script fragments and calls functions defined in them."""

    def compile(self, source: str) -> Any:
        interpreter = dukpy.JSInterpreter()
        try:
            interpreter.evaljs(source)
        except dukpy.JSRuntimeError as e:
            raise ScriptCompileError(
                f"Failed to compile script fragment: {e}",
                error_code="script.compile_error",
            ) from e
        return interpreter

    def execute(
        self,
        slot: ContextSlot,
        fragment_id: str,
        source: str,
        function_name: str,
        argument: str,
    ) -> str:
        """
        Call `function_name(argument)` inside the context compiled from `source`.

        The context held by `slot` is reused when its identity equals
        `fragment_id`; otherwise `source` is compiled and replaces it.
        """
        if not _IDENTIFIER_RE.match(function_name):
            raise ScriptEvalError(
                f"Not a callable identifier: {function_name!r}",
                error_code="script.eval_error",
            )

        if not slot.matches(fragment_id):
            logger.debug(f"Compiling script fragment for {function_name} ({len(source)} chars)")
            slot.context = EngineContext(identity=fragment_id, interpreter=self.compile(source))

        interpreter = slot.context.interpreter
        try:
            result = interpreter.evaljs(f"{function_name}(dukpy['argument'])", argument=argument)
        except dukpy.JSRuntimeError as e:
            raise ScriptEvalError(
                f"Calling {function_name} failed: {e}",
                error_code="script.eval_error",
            ) from e

        if not isinstance(result, str):
            raise ScriptResultTypeError(
                f"{function_name} returned {type(result).__name__}, expected a string",
                error_code="script.result_type_error",
            )
        return result


_engine: ScriptEngine | None = None


def get_script_engine() -> ScriptEngine:
    global _engine
    if _engine is None:
        _engine = ScriptEngine()
    return _engine
