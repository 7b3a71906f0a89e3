import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()

GPU_STRATEGIES = ("engine", "launch")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _parse_resolution(value: str, default):
    try:
        w, h = value.lower().split("x")
        return int(w), int(h)
    except Exception:
        return default


@dataclass
class AppSettings:
    camera_source: str = field(default_factory=lambda: os.getenv("CAMERA_SOURCE", "libcamerasrc"))
    capture_format: str = field(default_factory=lambda: os.getenv("CAPTURE_FORMAT", "NV12"))
    capture_resolution: str = field(default_factory=lambda: os.getenv("CAPTURE_RESOLUTION", "1280x720"))
    display_resolution: str = field(default_factory=lambda: os.getenv("DISPLAY_RESOLUTION", "640x480"))
    gpu_strategy: str = field(default_factory=lambda: os.getenv("GPU_STRATEGY", "engine"))
    bus_poll_ms: int = field(default_factory=lambda: _env_int("BUS_POLL_MS", 100))
    key_wait_ms: int = field(default_factory=lambda: _env_int("KEY_WAIT_MS", 1))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def capture_size(self):
        return _parse_resolution(self.capture_resolution, (1280, 720))

    @property
    def display_size(self):
        return _parse_resolution(self.display_resolution, (640, 480))
