import sys
import time
from typing import Callable, Optional, TextIO


class FpsMeter:
    """
    Counts observed frames and reports count / elapsed whole seconds.
    Nothing is reported during the first second of a run.
    """

    def __init__(self, label: str, stream: Optional[TextIO] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.label = label
        self._stream = stream
        self._clock = clock
        self.frame_count = 0
        self._start = clock()

    def reset(self) -> None:
        self.frame_count = 0
        self._start = self._clock()

    def tick(self) -> Optional[float]:
        """Count one frame; return (and print) the current rate once a second has passed."""
        self.frame_count += 1
        elapsed = int(self._clock() - self._start)
        if elapsed <= 0:
            return None
        fps = self.frame_count / float(elapsed)
        stream = self._stream or sys.stdout
        # \r keeps this a single status line instead of a scrolling history
        stream.write(f"{self.label} FPS: {fps:.2f}\r")
        stream.flush()
        return fps
