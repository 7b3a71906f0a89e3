from abc import ABC, abstractmethod
from typing import Optional

from camviewer.utils.fps import FpsMeter


class VideoBackend(ABC):
    """Abstract interface for one way of driving a camera pipeline to the screen."""

    # True when the backend needs the process-wide GStreamer engine initialised.
    uses_engine = False

    def __init__(self, descriptor: str, meter: Optional[FpsMeter] = None):
        self.descriptor = descriptor
        self.meter = meter

    @abstractmethod
    def run(self) -> None:
        """Block until quit or end-of-stream; raise a ViewerError on failure."""
        ...

    @abstractmethod
    def release(self) -> None:
        """Free the session handle. Safe to call more than once."""
        ...
