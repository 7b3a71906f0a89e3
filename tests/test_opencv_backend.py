import io

import numpy as np
import pytest

from camviewer.errors import EmptyFrameError, OpenFailureError
from camviewer.utils.fps import FpsMeter
from camviewer.video.opencv_backend import OpenCVBackend

from conftest import FakeClock, bgr_frame

DESC = "videotestsrc ! video/x-raw,format=BGR ! appsink"


def make_backend():
    return OpenCVBackend(DESC, window_name="CPU Mode",
                         meter=FpsMeter("CPU Mode", stream=io.StringIO(), clock=FakeClock()))


def test_open_failure_creates_no_window(fake_cv):
    fake_cv.opened = False
    backend = make_backend()
    with pytest.raises(OpenFailureError):
        backend.run()
    assert fake_cv.shown == []
    assert fake_cv.destroy_calls == 0
    assert fake_cv.captures[0].descriptor == DESC


def test_empty_frame_ends_loop_and_releases_once(fake_cv):
    fake_cv.frames = [bgr_frame(), bgr_frame(), bgr_frame(), np.zeros((0, 0, 3), dtype=np.uint8), bgr_frame()]
    backend = make_backend()
    with pytest.raises(EmptyFrameError):
        backend.run()
    assert len(fake_cv.shown) == 3
    # the frame after the empty one is never pulled
    assert len(fake_cv.frames) == 1
    assert fake_cv.release_calls == 1
    assert fake_cv.destroy_calls == 1

    backend.release()
    assert fake_cv.release_calls == 1
    assert fake_cv.destroy_calls == 1


def test_failed_read_counts_as_empty_frame(fake_cv):
    fake_cv.frames = [bgr_frame()]
    with pytest.raises(EmptyFrameError):
        make_backend().run()
    assert len(fake_cv.shown) == 1


@pytest.mark.parametrize("key", [ord("q"), 27])
def test_quit_key_stops_after_current_frame(fake_cv, key):
    fake_cv.frames = [bgr_frame() for _ in range(5)]
    fake_cv.keys = [-1, key]
    backend = make_backend()
    backend.run()
    assert [name for name, _ in fake_cv.shown] == ["CPU Mode", "CPU Mode"]
    assert backend.meter.frame_count == 2
    assert fake_cv.release_calls == 1
    assert fake_cv.destroy_calls == 1


def test_other_keys_are_ignored(fake_cv):
    fake_cv.frames = [bgr_frame() for _ in range(3)]
    fake_cv.keys = [ord("x"), ord("Q")]
    with pytest.raises(EmptyFrameError):
        make_backend().run()
    assert len(fake_cv.shown) == 3
