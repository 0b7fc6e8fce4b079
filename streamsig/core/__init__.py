"""Core utilities: JS scanning, script execution, player handling and HTTP."""

from .js_scanner import between, cut_after_js
from .player import extract_functions, get_player_function_set, get_player_functions
from .script_engine import ContextSlot, ScriptEngine, get_script_engine

__all__ = [
    "ContextSlot",
    "ScriptEngine",
    "between",
    "cut_after_js",
    "extract_functions",
    "get_player_function_set",
    "get_player_functions",
    "get_script_engine",
]
