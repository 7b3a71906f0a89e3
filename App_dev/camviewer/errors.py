from typing import Optional


class ViewerError(RuntimeError):
    """Base for every failure that ends a viewer run."""


class InvalidModeError(ViewerError, ValueError):
    pass


class OpenFailureError(ViewerError):
    pass


class EmptyFrameError(ViewerError):
    pass


class EngineError(ViewerError):
    pass


class LaunchFailureError(ViewerError):
    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode
