"""PySide6 main window hosting the globe view."""

from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow

from gaia_viewer.models import FeatureRecord
from gaia_viewer.renderer import RendererInitError
from gaia_viewer.ui.constants import WINDOW_SIZE, WINDOW_TITLE
from gaia_viewer.ui.opengl import GlobeWidget

logger = logging.getLogger(__name__)

STATUS_HINT = "1-5: map mode  0: labels  drag/wheel/arrows: camera  R: reset"


class ViewerWindow(QMainWindow):
    """Top-level window; closes on Escape and exits non-zero if GL setup fails."""

    def __init__(self, records: Sequence[FeatureRecord]) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(*WINDOW_SIZE)
        self.init_error: RendererInitError | None = None

        self.globe = GlobeWidget(records, parent=self)
        self.setCentralWidget(self.globe)
        self.globe.initFailed.connect(self._on_init_failed)
        self.globe.stateChanged.connect(self._refresh_status)

        self._status_label = QLabel()
        self.statusBar().addPermanentWidget(self._status_label)
        self.statusBar().showMessage(STATUS_HINT)
        self._refresh_status()

    def _refresh_status(self) -> None:
        state = self.globe.state
        labels = "on" if state.labels_enabled else "off"
        self._status_label.setText(f"Mode: {state.map_mode.title} | Labels: {labels}")

    def _on_init_failed(self, error: RendererInitError) -> None:  # pragma: no cover - GPU path
        self.init_error = error
        QApplication.exit(1)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # pragma: no cover - Qt hook
        if event.key() == Qt.Key.Key_Escape:
            self.close()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:  # pragma: no cover - Qt hook
        self.globe.release_gl()
        super().closeEvent(event)
