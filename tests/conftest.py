import cv2
import numpy as np
import pytest
from loguru import logger


class CvRecorder:
    """Stands in for the camera + HighGUI side of OpenCV and records every call."""

    def __init__(self):
        self.opened = True
        self.frames = []
        self.keys = []
        self.captures = []
        self.shown = []
        self.destroy_calls = 0

    def imshow(self, name, frame):
        self.shown.append((name, frame.shape))

    def wait_key(self, delay):
        return self.keys.pop(0) if self.keys else -1

    def destroy_all_windows(self):
        self.destroy_calls += 1

    @property
    def release_calls(self):
        return sum(cap.release_calls for cap in self.captures)


def make_capture_class(recorder):
    class FakeCapture:
        def __init__(self, descriptor, api=None):
            self.descriptor = descriptor
            self.api = api
            self.release_calls = 0
            recorder.captures.append(self)

        def isOpened(self):
            return recorder.opened

        def read(self):
            if not recorder.frames:
                return False, None
            frame = recorder.frames.pop(0)
            return frame is not None and frame.size > 0, frame

        def release(self):
            self.release_calls += 1

    return FakeCapture


def bgr_frame(w=640, h=480):
    return np.zeros((h, w, 3), dtype=np.uint8)


@pytest.fixture
def fake_cv(monkeypatch):
    rec = CvRecorder()
    monkeypatch.setattr(cv2, "VideoCapture", make_capture_class(rec))
    monkeypatch.setattr(cv2, "imshow", rec.imshow)
    monkeypatch.setattr(cv2, "waitKey", rec.wait_key)
    monkeypatch.setattr(cv2, "destroyAllWindows", rec.destroy_all_windows)
    return rec


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CAMERA_SOURCE", "CAPTURE_FORMAT", "CAPTURE_RESOLUTION", "DISPLAY_RESOLUTION",
                 "GPU_STRATEGY", "BUS_POLL_MS", "KEY_WAIT_MS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    logger.remove()


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now
