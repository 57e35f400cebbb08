# galaxia/control/control_window.py
import logging
from typing import Optional

from PyQt5 import QtWidgets, QtCore, QtGui

from ..generator import GalaxyParameters, fields_from_dict
from .controller import GalaxyController
from .galaxy_tab import GalaxyTab
from .preset_manager import PresetManager
from .stars_tab import StarsTab

logger = logging.getLogger(__name__)

_CUSTOM_LABEL = "(custom)"


class ControlWindow(QtWidgets.QMainWindow):
    """Control Panel editing the galaxy shown by ``view``.

    ``view`` must provide ``request_regenerate(params)`` and
    ``set_rotating(enabled)``.
    """

    def __init__(
        self,
        view,
        presets: Optional[PresetManager] = None,
        params: Optional[GalaxyParameters] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Control Panel")
        self.view = view
        self.presets = presets if presets is not None else PresetManager()
        self.controller = GalaxyController(
            on_regenerate=self.view.request_regenerate,
            on_rotation=self.view.set_rotating,
            params=params,
        )

        # Presets toolbar
        toolbar = QtWidgets.QToolBar("Presets")
        toolbar.setMovable(False)
        toolbar.setFloatable(False)
        toolbar.setIconSize(QtCore.QSize(18, 18))
        self.addToolBar(QtCore.Qt.TopToolBarArea, toolbar)
        style = self.style()

        toolbar.addWidget(QtWidgets.QLabel("Preset:"))
        self.cb_presets = QtWidgets.QComboBox()
        self.cb_presets.setSizeAdjustPolicy(QtWidgets.QComboBox.AdjustToContents)
        self.cb_presets.setMinimumContentsLength(10)
        self.cb_presets.activated.connect(self.on_preset_selected)
        toolbar.addWidget(self.cb_presets)

        self.act_save_preset = QtWidgets.QAction(
            style.standardIcon(QtWidgets.QStyle.SP_DialogSaveButton), "Save preset as…", self
        )
        self.act_save_preset.setShortcut(QtGui.QKeySequence("Ctrl+S"))
        self.act_save_preset.triggered.connect(self.save_preset_as)
        self.addAction(self.act_save_preset)
        toolbar.addAction(self.act_save_preset)

        self.act_delete_preset = QtWidgets.QAction(
            style.standardIcon(QtWidgets.QStyle.SP_TrashIcon), "Delete preset", self
        )
        self.act_delete_preset.triggered.connect(self.delete_preset)
        toolbar.addAction(self.act_delete_preset)

        # Parameter groups
        self.tabs = QtWidgets.QTabWidget()
        self.tab_galaxy = GalaxyTab()
        self.tab_stars = StarsTab()
        for t in [self.tab_galaxy, self.tab_stars]:
            t.changed.connect(self.on_delta)
        self.tabs.addTab(self.tab_galaxy, "Galaxy")
        self.tabs.addTab(self.tab_stars, "Stars")

        self.btn_toggle_rotation = QtWidgets.QPushButton("Toggle Rotation")
        self.btn_toggle_rotation.clicked.connect(self.toggle_rotation)
        self.btn_restore_defaults = QtWidgets.QPushButton("Restore Defaults")
        self.btn_restore_defaults.clicked.connect(self.restore_defaults)

        central = QtWidgets.QWidget()
        lay = QtWidgets.QVBoxLayout(central)
        lay.setContentsMargins(8, 8, 8, 8)
        lay.addWidget(self.tabs, 1)
        lay.addWidget(self.btn_toggle_rotation)
        lay.addWidget(self.btn_restore_defaults)
        self.setCentralWidget(central)
        self.setStatusBar(QtWidgets.QStatusBar())
        self.resize(360, 520)

        self.sync_widgets()
        self.refresh_presets()

    # ------------------------------------------------------------------ state
    @property
    def params(self) -> GalaxyParameters:
        return self.controller.params

    def sync_widgets(self):
        data = self.params.to_dict()
        self.tab_galaxy.set_values(data)
        self.tab_stars.set_values(data)

    def on_delta(self, delta: dict):
        try:
            self.controller.update(**fields_from_dict(delta))
        except ValueError as exc:
            logger.warning("Rejected edit %s: %s", delta, exc)
            self.statusBar().showMessage(f"Invalid value: {exc}", 5000)
            self.sync_widgets()
            return
        self.sync_preset_selection()

    def toggle_rotation(self):
        rotating = self.controller.toggle_rotation()
        self.statusBar().showMessage("Rotation on" if rotating else "Rotation off", 2000)

    def restore_defaults(self):
        self.controller.restore_defaults()
        self.sync_widgets()
        self.sync_preset_selection()

    # ------------------------------------------------------------------ presets
    def refresh_presets(self, select: Optional[str] = None):
        with QtCore.QSignalBlocker(self.cb_presets):
            self.cb_presets.clear()
            self.cb_presets.addItem(_CUSTOM_LABEL, None)
            for name in self.presets.names():
                self.cb_presets.addItem(name, name)
        if select is not None:
            self._select_preset(select)
        else:
            self.sync_preset_selection()

    def sync_preset_selection(self):
        self._select_preset(self.presets.find_match(self.params.to_dict()))

    def _select_preset(self, name: Optional[str]):
        index = self.cb_presets.findData(name) if name else 0
        with QtCore.QSignalBlocker(self.cb_presets):
            self.cb_presets.setCurrentIndex(max(0, index))
        self.act_delete_preset.setEnabled(bool(name) and name != self.presets.DEFAULT_NAME)

    def current_preset(self) -> Optional[str]:
        data = self.cb_presets.currentData()
        return data if isinstance(data, str) else None

    def on_preset_selected(self, index: int):
        name = self.cb_presets.itemData(index)
        if not isinstance(name, str):
            return
        self.apply_preset(name)

    def apply_preset(self, name: str):
        payload = self.presets.get(name)
        payload["rotate"] = self.params.rotate
        self.controller.load(payload)
        self.sync_widgets()
        self._select_preset(name)

    def save_preset_as(self):
        name, ok = QtWidgets.QInputDialog.getText(
            self, "Save preset", "Preset name:", text=self.current_preset() or ""
        )
        if not ok:
            return
        try:
            name = self.presets.save(name, self.params.to_dict())
        except (ValueError, OSError) as exc:
            logger.warning("Could not save preset %r: %s", name, exc)
            QtWidgets.QMessageBox.warning(self, "Error", str(exc))
            return
        self.refresh_presets(select=name)

    def delete_preset(self):
        name = self.current_preset()
        if not name:
            return
        response = QtWidgets.QMessageBox.question(self, "Delete preset", f"Delete '{name}'?")
        if response != QtWidgets.QMessageBox.Yes:
            return
        try:
            self.presets.delete(name)
        except (KeyError, ValueError, OSError) as exc:
            logger.warning("Could not delete preset %r: %s", name, exc)
            QtWidgets.QMessageBox.warning(self, "Error", str(exc))
            return
        self.refresh_presets()
