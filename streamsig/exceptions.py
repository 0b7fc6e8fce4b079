"""
Error types raised by the signature resolution core.

Most of these never reach a caller: extraction misses and script engine
failures are converted into identity transforms or same-URL fallbacks by
the modules that raise them. Only FormatNotFound is fatal to a call.
"""


class StreamSigError(Exception):
    """Base class for all streamsig errors."""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class ExtractionMiss(StreamSigError):
    """A marker or function definition was not found in the player script."""


class ScriptEngineError(StreamSigError):
    """Base class for failures inside the embedded JavaScript engine."""


class ScriptCompileError(ScriptEngineError):
    pass


class ScriptEvalError(ScriptEngineError):
    pass


class ScriptResultTypeError(ScriptEngineError):
    pass


class InvalidURL(StreamSigError, ValueError):
    """A URL could not be parsed into scheme, host and query."""


class FormatNotFound(StreamSigError):
    """No format survived filtering and ranking."""

    def __init__(self, message: str = "No format matches the requested filter"):
        super().__init__(message, error_code="formats.not_found")
