"""Error types raised by the engine."""


class MalformedFrameError(ValueError):
    """A chroma frame had the wrong length or invalid values."""


class EngineStoppedError(RuntimeError):
    """A frame was delivered while the engine was stopped."""
