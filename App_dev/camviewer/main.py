import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from camviewer.config.settings import AppSettings
from camviewer.controllers.controller import ViewerController
from camviewer.errors import ViewerError

LOG_FORMAT = "<level>{level: <7}</level> | {message}"


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    settings = AppSettings()
    configure_logging(settings.log_level)

    prog = Path(argv[0]).name if argv else "camviewer"
    if len(argv) < 2:
        logger.error("Usage: {} <mode> (cpu/gpu)", prog)
        return -1

    try:
        controller = ViewerController(argv[1], settings)
        controller.run()
    except ViewerError as e:
        logger.error("{}", e)
        return -1
    except Exception as e:
        # cv2.error, GLib.Error and friends from the collaborators
        logger.error("Error: {}", e)
        return -1

    # Leave the in-place FPS status line behind
    sys.stdout.write("\n")
    sys.stdout.flush()
    return 0


def run() -> None:
    sys.exit(main())
