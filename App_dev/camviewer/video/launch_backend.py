import shlex
import subprocess
from typing import List, Optional

from loguru import logger

from camviewer.errors import LaunchFailureError
from camviewer.video.base import VideoBackend

GST_LAUNCH = "gst-launch-1.0"


class LaunchBackend(VideoBackend):
    """
    Accelerated-Display path that hands the whole pipeline to an external
    gst-launch-1.0 process and blocks until it exits. No frame counting:
    the child process owns the bus.
    """

    def __init__(self, descriptor: str, executable: str = GST_LAUNCH):
        super().__init__(descriptor)
        self._executable = executable
        self._proc: Optional[subprocess.CompletedProcess] = None
        self.returncode: Optional[int] = None

    def command(self) -> List[str]:
        return [self._executable, *shlex.split(self.descriptor)]

    def run(self) -> None:
        cmd = self.command()
        logger.info("[LaunchBackend] Running: {}", " ".join(cmd))
        try:
            self._proc = subprocess.run(cmd)
        except FileNotFoundError as e:
            raise LaunchFailureError(f"Error: {self._executable} not found.") from e
        except KeyboardInterrupt:
            logger.info("[LaunchBackend] Interrupted by user.")
            return

        self.returncode = self._proc.returncode
        self.release()
        if self.returncode != 0:
            raise LaunchFailureError(
                f"Error: GPU pipeline exited with status {self.returncode}.",
                returncode=self.returncode,
            )
        logger.info("[LaunchBackend] Pipeline process finished.")

    def release(self) -> None:
        if self._proc is None:
            return
        # subprocess.run already reaped the child; drop the handle
        self._proc = None
        logger.debug("[LaunchBackend] Process handle released.")
