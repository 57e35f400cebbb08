# -*- coding: utf-8 -*-
import argparse
import logging
import random
import sys
from typing import List, Optional

# Substring of the import error -> what to install.
_MISSING_LIBRARY_HINTS = {
    "libGL.so": "install the Mesa OpenGL runtime (e.g. libgl1)",
    "libEGL.so": "install the EGL runtime (e.g. libegl1)",
    "libxkbcommon": "install libxkbcommon-x11-0",
    "No module named 'PyQt5'": "pip install 'PyQt5>=5.15'",
}


def qt_import_failure_message(exc: ImportError) -> str:
    details = str(exc)
    hints = [hint for marker, hint in _MISSING_LIBRARY_HINTS.items() if marker in details]
    lines = [f"galaxia: cannot load the Qt bindings ({details})."]
    lines += [f"  hint: {hint}" for hint in hints]
    return "\n".join(lines)


try:
    from PyQt5 import QtWidgets, QtGui
    from PyQt5.QtCore import Qt
except ImportError as exc:  # pragma: no cover - environment dependent
    raise SystemExit(qt_import_failure_message(exc)) from exc

from .control.control_window import ControlWindow
from .control.preset_manager import PresetManager
from .generator import GalaxyParameters
from .view import GalaxyEngine, GalaxyViewWidget

logger = logging.getLogger(__name__)

LOG_FORMAT = "[Galaxia][%(levelname)s] %(name)s: %(message)s"


def configure_logging(level="WARNING") -> None:
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="galaxia", description="Procedural spiral galaxy viewer.")
    parser.add_argument(
        "--backend",
        choices=("auto", "opengl", "raster"),
        default="auto",
        help="Rendering widget (default: auto, see GALAXIA_FORCE_BACKEND).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible galaxies.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        type=str.upper,
        help="Logging verbosity (default: WARNING).",
    )
    return parser


class ViewWindow(QtWidgets.QMainWindow):
    def __init__(self, engine: GalaxyEngine, backend: str = "auto"):
        super().__init__(None)
        self.setWindowTitle("Galaxia")
        self.view = GalaxyViewWidget(self, engine=engine, force_backend=backend)
        w = QtWidgets.QWidget()
        lay = QtWidgets.QVBoxLayout(w)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.view)
        self.setCentralWidget(w)
        self.resize(1024, 720)

        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)
        QtWidgets.QShortcut(QtGui.QKeySequence("F"), self, activated=self.toggle_fullscreen)

    def toggle_fullscreen(self):
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()

    def closeEvent(self, event: QtGui.QCloseEvent):
        self.view.dispose()
        super().closeEvent(event)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    app.setApplicationName("Galaxia")

    params = GalaxyParameters()
    engine = GalaxyEngine(params, rng=random.Random(args.seed))
    engine.regenerate(params)
    logger.info("initial galaxy: %d particles (seed=%s)", params.count, args.seed)

    view_win = ViewWindow(engine, backend=args.backend)
    logger.info("view backend: %s", getattr(view_win.view, "backend_name", "unknown"))
    ctrl_win = ControlWindow(view_win.view, presets=PresetManager(), params=params)

    # The control panel follows the view window's lifetime.
    app.setQuitOnLastWindowClosed(False)
    view_win.destroyed.connect(app.quit)
    view_win.setAttribute(Qt.WA_DeleteOnClose, True)

    view_win.show()
    geo = view_win.frameGeometry()
    ctrl_win.move(geo.right() + 12, geo.top())
    ctrl_win.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
