from typing import Optional

import cv2
from loguru import logger

from camviewer.errors import EmptyFrameError, OpenFailureError
from camviewer.utils.fps import FpsMeter
from camviewer.utils.keys import poll_quit
from camviewer.video.base import VideoBackend


class OpenCVBackend(VideoBackend):
    """
    Local-Display path: decoded BGR frames are pulled from an appsink through
    OpenCV's GStreamer capture backend and shown in an OpenCV window.
    """

    def __init__(self, descriptor: str, window_name: str = "CPU Mode",
                 meter: Optional[FpsMeter] = None, key_wait_ms: int = 1):
        super().__init__(descriptor, meter or FpsMeter(window_name))
        self.window_name = window_name
        self._key_wait_ms = key_wait_ms
        self._cap: Optional[cv2.VideoCapture] = None
        self._window_open = False

    def open(self) -> None:
        logger.info("[OpenCVBackend] Pipeline: {}", self.descriptor)
        cap = cv2.VideoCapture(self.descriptor, cv2.CAP_GSTREAMER)
        if not cap.isOpened():
            cap.release()
            raise OpenFailureError("Error: Unable to open the CPU pipeline.")
        self._cap = cap

    def run(self) -> None:
        self.open()
        try:
            self._frame_loop()
        finally:
            self.release()

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug("[OpenCVBackend] Capture released.")
        if self._window_open:
            cv2.destroyAllWindows()
            self._window_open = False

    # --- Internals ---
    def _frame_loop(self) -> None:
        self.meter.reset()
        try:
            while True:
                ok, frame = self._cap.read()
                if not ok or frame is None or frame.size == 0:
                    raise EmptyFrameError("Error: Captured empty frame.")

                cv2.imshow(self.window_name, frame)
                self._window_open = True
                self.meter.tick()

                if poll_quit(self._key_wait_ms):
                    logger.info("[OpenCVBackend] Quit requested after {} frames.", self.meter.frame_count)
                    return
        except KeyboardInterrupt:
            logger.info("[OpenCVBackend] Interrupted by user.")
