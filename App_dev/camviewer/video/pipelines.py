from enum import Enum

from camviewer.config.settings import AppSettings
from camviewer.errors import InvalidModeError

# Name of the render sink in the accelerated descriptor; the engine backend
# looks it up to count rendered buffers.
RENDER_SINK_NAME = "display"


class Mode(Enum):
    CPU = "cpu"   # Local-Display: frames pulled into OpenCV
    GPU = "gpu"   # Accelerated-Display: GL sink driven by GStreamer

    @property
    def label(self) -> str:
        return f"{self.name} Mode"


def parse_mode(token: str) -> Mode:
    """Map a CLI token to a Mode. Exact, case-sensitive match only."""
    for mode in Mode:
        if token == mode.value:
            return mode
    raise InvalidModeError("Invalid mode. Use 'cpu' or 'gpu'.")


def build_pipeline(mode: Mode, settings: AppSettings) -> str:
    w, h = settings.capture_size
    source = (
        f"{settings.camera_source} ! "
        f"video/x-raw,format={settings.capture_format},width={w},height={h} ! "
    )
    if mode is Mode.CPU:
        dw, dh = settings.display_size
        return (
            source
            + "videoconvert ! videoscale ! "
            f"video/x-raw,width={dw},height={dh},format=BGR ! "
            "appsink drop=true max-buffers=1"
        )
    return (
        source
        + "glupload ! glcolorconvert ! glcolorscale ! "
        f"glimagesink name={RENDER_SINK_NAME}"
    )
