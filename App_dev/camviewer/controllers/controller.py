from __future__ import annotations

from contextlib import nullcontext
from typing import Optional

from loguru import logger

from camviewer.config.settings import AppSettings, GPU_STRATEGIES
from camviewer.utils.fps import FpsMeter
from camviewer.video.base import VideoBackend
from camviewer.video.launch_backend import LaunchBackend
from camviewer.video.opencv_backend import OpenCVBackend
from camviewer.video.pipelines import Mode, build_pipeline, parse_mode

# The engine backend needs PyGObject + GStreamer typelibs; the CPU path does not.
try:
    from camviewer.video.gstreamer_backend import GStreamerBackend, gst_engine
except Exception as _imp_err:
    GStreamerBackend = None  # type: ignore
    gst_engine = None  # type: ignore
    logger.debug("GStreamer backend not available here: {}", _imp_err)


class ViewerController:
    """
    Chooses the video backend from the mode:
      - cpu -> OpenCVBackend (frames pulled into an OpenCV window)
      - gpu -> GStreamerBackend (bus polling), or LaunchBackend when
               GPU_STRATEGY=launch
    Construction validates the mode and builds the descriptor without
    touching any camera resource.
    """

    def __init__(self, mode_token: str, settings: Optional[AppSettings] = None):
        self.settings = settings or AppSettings()
        self.mode = parse_mode(mode_token)
        self.pipeline = build_pipeline(self.mode, self.settings)
        self.backend: Optional[VideoBackend] = None

    def run(self) -> None:
        self.backend = self._make_backend()
        scope = gst_engine() if self.backend.uses_engine else nullcontext()
        logger.info("Starting {} viewer ({})", self.mode.label, type(self.backend).__name__)
        with scope:
            self.backend.run()
        logger.info("{} viewer stopped.", self.mode.label)

    def _make_backend(self) -> VideoBackend:
        meter = FpsMeter(self.mode.label)
        if self.mode is Mode.CPU:
            return OpenCVBackend(self.pipeline, window_name=self.mode.label,
                                 meter=meter, key_wait_ms=self.settings.key_wait_ms)

        strategy = self.settings.gpu_strategy.lower()
        if strategy not in GPU_STRATEGIES:
            logger.warning("Unknown GPU_STRATEGY '{}', using 'engine'.", strategy)
            strategy = "engine"

        if strategy == "engine" and GStreamerBackend is None:
            logger.warning("GStreamer bindings unavailable, launching {} instead.", "gst-launch-1.0")
            strategy = "launch"

        if strategy == "launch":
            return LaunchBackend(self.pipeline)
        return GStreamerBackend(self.pipeline, meter=meter,
                                poll_ms=self.settings.bus_poll_ms,
                                key_wait_ms=self.settings.key_wait_ms)
