"""Tests for the dukpy-backed script engine and its context slot."""

import pytest

from streamsig.core.script_engine import ContextSlot, ScriptEngine, get_script_engine
from streamsig.exceptions import (
    ScriptCompileError,
    ScriptEngineError,
    ScriptEvalError,
    ScriptResultTypeError,
)

UPPER = "var up=function(a){return a.toUpperCase()};"
REVERSE = "var rev=function(a){return a.split('').reverse().join('')};"


class TestExecute:
    def test_calls_named_function(self):
        slot = ContextSlot()
        assert ScriptEngine().execute(slot, UPPER, UPPER, "up", "abc") == "ABC"

    def test_argument_is_not_interpolated(self):
        slot = ContextSlot()
        tricky = "\"');throw 1;//\\"
        assert ScriptEngine().execute(slot, UPPER, UPPER, "up", tricky) == tricky.upper()

    def test_non_ascii_argument(self):
        slot = ContextSlot()
        assert ScriptEngine().execute(slot, REVERSE, REVERSE, "rev", "фыва") == "авыф"

    def test_compile_error(self):
        with pytest.raises(ScriptCompileError):
            ScriptEngine().execute(ContextSlot(), "bad", "var f=function(a){", "f", "x")

    def test_compile_error_leaves_slot_untouched(self):
        engine = ScriptEngine()
        slot = ContextSlot()
        engine.execute(slot, UPPER, UPPER, "up", "a")
        context = slot.context
        with pytest.raises(ScriptCompileError):
            engine.execute(slot, "bad", "var f=function(a){", "f", "x")
        assert slot.context is context

    def test_eval_error(self):
        source = "var boom=function(a){throw new Error('boom')};"
        with pytest.raises(ScriptEvalError):
            ScriptEngine().execute(ContextSlot(), source, source, "boom", "x")

    def test_undefined_function(self):
        with pytest.raises(ScriptEvalError):
            ScriptEngine().execute(ContextSlot(), UPPER, UPPER, "missing", "x")

    def test_invalid_function_name(self):
        with pytest.raises(ScriptEvalError):
            ScriptEngine().execute(ContextSlot(), UPPER, UPPER, "up(1);up", "x")

    def test_non_string_result(self):
        source = "var num=function(a){return a.length};"
        with pytest.raises(ScriptResultTypeError):
            ScriptEngine().execute(ContextSlot(), source, source, "num", "abc")

    def test_errors_share_base_class(self):
        for cls in (ScriptCompileError, ScriptEvalError, ScriptResultTypeError):
            assert issubclass(cls, ScriptEngineError)


class TestContextSlot:
    def test_empty_slot(self):
        slot = ContextSlot()
        assert slot.context is None
        assert not slot.matches(UPPER)

    def test_reuses_context_for_same_identity(self, monkeypatch):
        engine = ScriptEngine()
        compiled = []
        original = engine.compile

        def spy(source):
            compiled.append(source)
            return original(source)

        monkeypatch.setattr(engine, "compile", spy)
        slot = ContextSlot()
        engine.execute(slot, UPPER, UPPER, "up", "a")
        engine.execute(slot, UPPER, UPPER, "up", "b")
        assert compiled == [UPPER]

    def test_different_identity_evicts(self):
        engine = ScriptEngine()
        slot = ContextSlot()
        engine.execute(slot, UPPER, UPPER, "up", "a")
        first = slot.context
        assert engine.execute(slot, REVERSE, REVERSE, "rev", "ab") == "ba"
        assert slot.context is not first
        assert slot.context.identity == REVERSE

    def test_identity_not_function_name(self):
        engine = ScriptEngine()
        slot = ContextSlot()
        other = "var up=function(a){return a+'!'};"
        engine.execute(slot, UPPER, UPPER, "up", "a")
        assert engine.execute(slot, other, other, "up", "a") == "a!"

    def test_clear(self):
        slot = ContextSlot()
        ScriptEngine().execute(slot, UPPER, UPPER, "up", "a")
        slot.clear()
        assert slot.context is None


def test_get_script_engine_is_shared():
    assert get_script_engine() is get_script_engine()
