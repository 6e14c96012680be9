from typing import Optional

from PyQt5 import QtCore, QtWidgets

from ..model import Idea

__all__ = ["IdeaDetailPanel"]


class IdeaDetailPanel(QtWidgets.QFrame):
    """Card shown over the sphere while a node is inspected."""

    closeRequested = QtCore.pyqtSignal()
    coreRequested = QtCore.pyqtSignal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, accent: str = "#2DD4BF"):
        super().__init__(parent)
        self.setObjectName("IdeaDetailPanel")
        self.setFixedWidth(320)
        self._idea: Optional[Idea] = None

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(20, 16, 20, 20)
        layout.setSpacing(10)

        top = QtWidgets.QHBoxLayout()
        top.setContentsMargins(0, 0, 0, 0)
        self.lbl_category = QtWidgets.QLabel()
        self.lbl_category.setObjectName("IdeaCategory")
        top.addWidget(self.lbl_category, 0, QtCore.Qt.AlignLeft)
        top.addStretch(1)
        self.btn_close = QtWidgets.QToolButton()
        self.btn_close.setObjectName("IdeaClose")
        self.btn_close.setText("×")
        self.btn_close.setCursor(QtCore.Qt.PointingHandCursor)
        self.btn_close.clicked.connect(self.closeRequested.emit)
        top.addWidget(self.btn_close, 0, QtCore.Qt.AlignRight)
        layout.addLayout(top)

        self.lbl_phrase = QtWidgets.QLabel()
        self.lbl_phrase.setObjectName("IdeaPhrase")
        self.lbl_phrase.setWordWrap(True)
        layout.addWidget(self.lbl_phrase)

        self.lbl_description = QtWidgets.QLabel()
        self.lbl_description.setObjectName("IdeaDescription")
        self.lbl_description.setWordWrap(True)
        layout.addWidget(self.lbl_description)

        self.btn_core = QtWidgets.QPushButton("Set as core")
        self.btn_core.setObjectName("IdeaCore")
        self.btn_core.setCursor(QtCore.Qt.PointingHandCursor)
        self.btn_core.clicked.connect(self.coreRequested.emit)
        layout.addWidget(self.btn_core)

        self.setStyleSheet(f"""
            QFrame#IdeaDetailPanel {{
                background: rgba(15, 23, 42, 230);
                border: 1px solid {accent};
                border-radius: 16px;
            }}
            QLabel#IdeaCategory {{
                color: {accent};
                font-weight: 700;
            }}
            QLabel#IdeaPhrase {{
                color: white;
                font-size: 20px;
                font-weight: 700;
            }}
            QLabel#IdeaDescription {{
                color: #cbd5e1;
            }}
            QToolButton#IdeaClose {{
                color: #94a3b8;
                border: none;
                font-size: 18px;
            }}
            QPushButton#IdeaCore {{
                background: #0d9488;
                color: white;
                border-radius: 8px;
                padding: 8px;
            }}
            QPushButton#IdeaCore:hover {{
                background: #14b8a6;
            }}
        """)
        self.hide()

    @property
    def idea(self) -> Optional[Idea]:
        return self._idea

    def show_idea(self, idea: Idea) -> None:
        self._idea = idea
        self.lbl_category.setText((idea.category or "—").upper())
        self.lbl_phrase.setText(idea.phrase)
        self.lbl_description.setText(idea.description)
        self.adjustSize()
        self.show()
        self.raise_()

    def clear(self) -> None:
        self._idea = None
        self.hide()

    # Clicks on the card must not reach the sphere underneath and dismiss it.
    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        event.accept()
