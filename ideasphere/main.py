# -*- coding: utf-8 -*-
"""Desktop entry point: ``python -m ideasphere``."""

import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from .config import Settings, load_config
from .engine import IdeaSphereEngine
from .library import IdeaLibrary
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def _handle_qt_import_error(exc: ImportError) -> NoReturn:
    """Exit with a helpful message when the Qt bindings cannot be imported."""

    details = str(exc)
    message_lines = [
        "Unable to start IdeaSphere: importing PyQt5 failed.",
        "Check that PyQt5 is installed and that the required OpenGL libraries are available.",
    ]
    if "libGL.so.1" in details:
        message_lines.append(
            "Hint: the system library libGL.so.1 is missing. Install the Mesa/OpenGL packages for your distribution."
        )
    message_lines.append(f"Original error: {details}")
    raise SystemExit("\n".join(message_lines)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ideasphere", description="Browse ideas on a rotating 3D sphere.")
    parser.add_argument("--ideas", help="Idea library JSON file (defaults to the bundled sample)")
    parser.add_argument("--topic", help="Topic shown first (defaults to the library's start topic)")
    parser.add_argument("--config", help="JSON file overriding the default parameters")
    parser.add_argument("--backend", choices=("auto", "opengl", "raster"), default="auto")
    parser.add_argument("--log-level", default="INFO", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Load everything and compute one frame without opening a window",
    )
    return parser


def _run_headless(library: IdeaLibrary, topic: str, settings: Settings) -> int:
    engine = IdeaSphereEngine(settings)
    engine.set_items(library.ideas_for(topic), topic)
    frame = engine.step()
    in_front = sum(1 for item in frame.items if not (item.is_behind or item.is_culled))
    logger.info("headless frame: %d nodes, %d in front, %d wireframe lines", len(frame.items), in_front, len(frame.wireframe))
    return 0


def _run_gui(library: IdeaLibrary, topic: str, settings: Settings, backend: str) -> int:
    try:
        from PyQt5 import QtCore, QtGui, QtWidgets
    except ImportError as exc:  # pragma: no cover - depends on the environment
        _handle_qt_import_error(exc)
    from .view.window import ViewWindow

    def _log_unhandled(exc_type, exc_value, exc_tb):
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

    sys.excepthook = _log_unhandled
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("IdeaSphere")

    window = ViewWindow(library, settings, QtGui.QGuiApplication.primaryScreen(), force_backend=backend)
    window.show_topic(topic)
    window.show()
    return app.exec_()


def main(argv: Optional[List[str]] = None, headless: bool = False) -> int:
    """Start the application and return the exit code.

    With ``headless`` (or ``--headless``) no Qt object is created: the library
    and config are loaded and a single frame is computed, which is enough to
    validate input files.
    """

    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        settings = Settings.from_config(load_config(args.config))
        library = IdeaLibrary.load(args.ideas)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    topic = args.topic or library.start
    if headless or args.headless:
        return _run_headless(library, topic, settings)
    return _run_gui(library, topic, settings, args.backend)


if __name__ == "__main__":
    sys.exit(main())
