from contextlib import contextmanager
from typing import Callable, Optional

from loguru import logger

import gi
gi.require_version("Gst", "1.0")
from gi.repository import Gst, GLib

from camviewer.errors import EngineError, OpenFailureError
from camviewer.utils.fps import FpsMeter
from camviewer.utils.keys import poll_quit
from camviewer.video.base import VideoBackend
from camviewer.video.pipelines import RENDER_SINK_NAME

FRAME_RENDERED = "frame-rendered"


@contextmanager
def gst_engine():
    """Process-wide GStreamer setup, torn down on every exit path."""
    Gst.init(None)
    logger.debug("GStreamer {} initialised.", Gst.version_string())
    try:
        yield
    finally:
        Gst.deinit()
        logger.debug("GStreamer deinitialised.")


class GStreamerBackend(VideoBackend):
    """
    Accelerated-Display path using gst-python.
    The GL sink renders on its own surface; this loop only watches the bus for
    errors, end-of-stream and one "frame-rendered" element message per buffer
    that reaches the sink.
    """

    uses_engine = True

    def __init__(self, descriptor: str, meter: Optional[FpsMeter] = None,
                 poll_ms: int = 100, key_wait_ms: int = 1,
                 quit_poller: Callable[[int], bool] = poll_quit):
        super().__init__(descriptor, meter or FpsMeter("GPU Mode"))
        self._poll_ms = max(1, poll_ms)
        self._key_wait_ms = key_wait_ms
        self._quit_poller = quit_poller
        self._pipeline: Optional[Gst.Element] = None

    # --- Public API ---
    def open(self) -> None:
        logger.info("[GStreamerBackend] Pipeline: {}", self.descriptor)
        try:
            pipeline = Gst.parse_launch(self.descriptor)
        except GLib.Error as e:
            raise OpenFailureError(f"Error: Failed to create GStreamer pipeline: {e.message}") from e
        if pipeline is None:
            raise OpenFailureError("Error: Failed to create GStreamer pipeline.")

        self._pipeline = pipeline
        self._attach_render_probe()

        ret = self._pipeline.set_state(Gst.State.PLAYING)
        if ret == Gst.StateChangeReturn.FAILURE:
            self.release()
            raise OpenFailureError("Error: Failed to set pipeline PLAYING.")

    def run(self) -> None:
        self.open()
        try:
            self._bus_loop()
        finally:
            self.release()

    def release(self) -> None:
        if self._pipeline is None:
            return
        self._pipeline.set_state(Gst.State.NULL)
        self._pipeline = None
        logger.debug("[GStreamerBackend] Pipeline set to NULL.")

    # --- Internals ---
    def _attach_render_probe(self) -> None:
        sink = self._pipeline.get_by_name(RENDER_SINK_NAME)
        if sink is None:
            logger.warning("[GStreamerBackend] No '{}' sink; FPS will not be reported.", RENDER_SINK_NAME)
            return
        pad = sink.get_static_pad("sink")
        pad.add_probe(Gst.PadProbeType.BUFFER, self._on_rendered_buffer, sink)

    @staticmethod
    def _on_rendered_buffer(pad, info, sink):
        # Streaming thread: only post, the bus is thread-safe.
        sink.post_message(Gst.Message.new_element(sink, Gst.Structure.new_empty(FRAME_RENDERED)))
        return Gst.PadProbeReturn.OK

    def _bus_loop(self) -> None:
        bus = self._pipeline.get_bus()
        wanted = Gst.MessageType.ERROR | Gst.MessageType.EOS | Gst.MessageType.ELEMENT | Gst.MessageType.WARNING
        self.meter.reset()
        try:
            while True:
                msg = bus.timed_pop_filtered(self._poll_ms * Gst.MSECOND, wanted)
                if msg is not None and self._handle_message(msg):
                    return
                if self.meter.frame_count > 0 and self._quit_poller(self._key_wait_ms):
                    logger.info("[GStreamerBackend] Quit requested after {} frames.", self.meter.frame_count)
                    return
        except KeyboardInterrupt:
            logger.info("[GStreamerBackend] Interrupted by user.")

    def _handle_message(self, msg) -> bool:
        """Returns True when the loop should stop normally; raises on error."""
        mtype = msg.type
        if mtype == Gst.MessageType.ERROR:
            err, debug = msg.parse_error()
            logger.debug("GStreamer error debug info: {}", debug)
            raise EngineError(f"GStreamer Error: {err.message}")
        elif mtype == Gst.MessageType.EOS:
            logger.info("End of stream.")
            return True
        elif mtype == Gst.MessageType.WARNING:
            err, debug = msg.parse_warning()
            logger.warning("GStreamer WARN: {} (debug: {})", err.message, debug)
        elif mtype == Gst.MessageType.ELEMENT and msg.has_name(FRAME_RENDERED):
            self.meter.tick()
        return False
