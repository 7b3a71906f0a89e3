import cv2

ESC = 27
QUIT_KEYS = (ord("q"), ESC)


def is_quit_key(code: int) -> bool:
    return code != -1 and (code & 0xFF) in QUIT_KEYS


def poll_quit(wait_ms: int = 1) -> bool:
    """Pump the OpenCV event loop for up to wait_ms and report a quit key press."""
    return is_quit_key(cv2.waitKey(max(1, wait_ms)))
