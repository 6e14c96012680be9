from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets
from PyQt5.QtCore import Qt

from ..config import Settings
from ..library import IdeaLibrary
from .view_widget import IdeaSphereViewWidget

__all__ = ["ViewWindow"]


class ViewWindow(QtWidgets.QMainWindow):
    """Main window hosting the sphere view and answering recenter requests."""

    topicChanged = QtCore.pyqtSignal(str)

    def __init__(
        self,
        library: IdeaLibrary,
        settings: Optional[Settings] = None,
        screen: Optional[QtGui.QScreen] = None,
        force_backend: Optional[str] = None,
    ):
        super().__init__(None)
        self.library = library
        self.view = IdeaSphereViewWidget(self, settings=settings, force_backend=force_backend)
        self.view.set_recenter_callback(self._on_recenter)

        w = QtWidgets.QWidget()
        lay = QtWidgets.QVBoxLayout(w)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.view)
        self.setCentralWidget(w)

        if screen is not None:
            self._apply_screen_geometry(screen)
        else:
            s = self.view.settings
            self.resize(s.viewport_width, s.viewport_height)
        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)
        QtWidgets.QShortcut(Qt.Key_Home, self, activated=self.view.reset_view)

    def _apply_screen_geometry(self, screen: QtGui.QScreen):
        geometry = screen.availableGeometry()
        width = int(geometry.width() * 0.8)
        height = int(geometry.height() * 0.8)
        left = geometry.left() + (geometry.width() - width) // 2
        top = geometry.top() + (geometry.height() - height) // 2
        self.setGeometry(left, top, width, height)

    def show_topic(self, topic: str) -> None:
        ideas = self.library.ideas_for(topic)
        self.view.set_items(ideas, topic)
        self.setWindowTitle(f"IdeaSphere — {topic}")
        self.topicChanged.emit(topic)

    def _on_recenter(self, phrase: str) -> None:
        # Leave the input handler first; the new layout arrives on the next loop turn.
        QtCore.QTimer.singleShot(0, lambda: self.show_topic(phrase))

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self.view.shutdown()
        super().closeEvent(event)
