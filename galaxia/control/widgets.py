from PyQt5 import QtWidgets, QtCore, QtGui

from ..color import parse_color, to_hex
from .config import DEFAULTS, PARAM_SPECS, TOOLTIPS

_INFO_STYLE = (
    "QToolButton{border:1px solid #5b6f99;border-radius:9px;padding:0;"
    "color:#c9d6ff;background:#1d2540;font-style:italic;}"
    "QToolButton:hover{background:#2a3560;}"
)
_RESET_STYLE = (
    "QToolButton{border:1px solid #5b6f99;border-radius:9px;padding:0;"
    "color:#ffb28a;background:#1d2540;}"
    "QToolButton:hover{background:#2a3560;}"
)


def info_button(key: str) -> QtWidgets.QToolButton:
    """Round "i" button showing the tooltip of parameter ``key``."""
    b = QtWidgets.QToolButton()
    b.setText("i")
    b.setFixedSize(18, 18)
    b.setToolTip(TOOLTIPS.get(key, ""))
    b.setToolTipDuration(0)
    b.setFocusPolicy(QtCore.Qt.NoFocus)
    b.setStyleSheet(_INFO_STYLE)
    return b


def reset_button(key: str, on_reset) -> QtWidgets.QToolButton:
    b = QtWidgets.QToolButton()
    b.setText("↺")
    b.setFixedSize(18, 18)
    b.setToolTip(f"Reset to {DEFAULTS[key]}")
    b.setFocusPolicy(QtCore.Qt.NoFocus)
    b.setObjectName(f"reset_{key}")
    b.setStyleSheet(_RESET_STYLE)
    b.clicked.connect(lambda _checked=False: on_reset(key))
    return b


def add_param_row(form: QtWidgets.QFormLayout, key: str, editor: QtWidgets.QWidget, on_reset) -> QtWidgets.QWidget:
    """Add ``editor`` for parameter ``key`` to ``form`` with its reset and info buttons."""
    holder = QtWidgets.QWidget()
    h = QtWidgets.QHBoxLayout(holder)
    h.setContentsMargins(0, 0, 0, 0)
    h.setSpacing(4)
    h.addWidget(editor, 1)
    h.addWidget(reset_button(key, on_reset))
    h.addWidget(info_button(key))
    label = QtWidgets.QLabel(PARAM_SPECS[key]["label"])
    label.setToolTip(TOOLTIPS.get(key, ""))
    form.addRow(label, holder)
    return holder


class SliderSpin(QtWidgets.QWidget):
    """Slider paired with a spin box.

    ``valueChanged`` follows every move; ``editingFinished`` fires once the
    user is done: slider released, spin box confirmed, or a keyboard/page
    step on the slider.
    """

    valueChanged = QtCore.pyqtSignal(float)
    editingFinished = QtCore.pyqtSignal()

    def __init__(self, minimum: float, maximum: float, step: float, decimals: int = 0, value: float = 0.0):
        super().__init__()
        self._decimals = max(0, int(decimals))
        self._step = float(step) if step > 0 else 1.0

        self.slider = QtWidgets.QSlider(QtCore.Qt.Horizontal)
        self.slider.setTracking(True)
        self.slider.setRange(0, int(round((maximum - minimum) / self._step)))
        self._minimum = float(minimum)

        if self._decimals:
            self.spin = QtWidgets.QDoubleSpinBox()
            self.spin.setDecimals(self._decimals)
            self.spin.setRange(float(minimum), float(maximum))
            self.spin.setSingleStep(self._step)
        else:
            self.spin = QtWidgets.QSpinBox()
            self.spin.setRange(int(minimum), int(maximum))
            self.spin.setSingleStep(max(1, int(self._step)))
        self.spin.setKeyboardTracking(False)
        self.spin.setMinimumWidth(84)

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)
        layout.addWidget(self.slider, 1)
        layout.addWidget(self.spin)

        self.slider.valueChanged.connect(self._on_slider_changed)
        self.slider.sliderReleased.connect(self.editingFinished.emit)
        self.spin.valueChanged.connect(self._on_spin_changed)
        self.spin.editingFinished.connect(self.editingFinished.emit)

        self.setValue(value)

    def _slider_to_value(self, raw: int) -> float:
        value = self._minimum + raw * self._step
        return round(value, self._decimals) if self._decimals else float(int(round(value)))

    def _on_slider_changed(self, raw: int):
        value = self._slider_to_value(raw)
        with QtCore.QSignalBlocker(self.spin):
            self.spin.setValue(value)
        self.valueChanged.emit(value)
        if not self.slider.isSliderDown():
            self.editingFinished.emit()

    def _on_spin_changed(self, value: float):
        with QtCore.QSignalBlocker(self.slider):
            self.slider.setValue(int(round((float(value) - self._minimum) / self._step)))
        self.valueChanged.emit(float(value))

    def setValue(self, value: float):
        with QtCore.QSignalBlocker(self.spin):
            self.spin.setValue(value if self._decimals else int(round(value)))
        with QtCore.QSignalBlocker(self.slider):
            self.slider.setValue(int(round((float(self.spin.value()) - self._minimum) / self._step)))

    def value(self) -> float:
        return float(self.spin.value())


class ColorButton(QtWidgets.QPushButton):
    """Button showing a color swatch; picking a new color emits ``colorChanged``."""

    colorChanged = QtCore.pyqtSignal(int)

    def __init__(self, color=0xFFFFFF, title: str = "Color"):
        super().__init__()
        self._title = title
        self._color = parse_color(color)
        self.setCursor(QtCore.Qt.PointingHandCursor)
        self.setMinimumHeight(24)
        self.clicked.connect(self.pick_color)
        self._refresh()

    def color(self) -> int:
        return self._color

    def setColor(self, color) -> None:
        self._color = parse_color(color)
        self._refresh()

    def pick_color(self):
        c = QtWidgets.QColorDialog.getColor(QtGui.QColor(to_hex(self._color)), self, self._title)
        if c.isValid() and parse_color(c.name()) != self._color:
            self.setColor(c.name())
            self.colorChanged.emit(self._color)

    def _refresh(self):
        name = to_hex(self._color)
        text_color = "#000000" if QtGui.QColor(name).lightness() > 140 else "#ffffff"
        self.setText(name)
        self.setStyleSheet(f"QPushButton{{background:{name};color:{text_color};border:1px solid #9aa5b1;border-radius:4px;}}")


class ParameterTab(QtWidgets.QWidget):
    """Form editing a group of galaxy parameters.

    Subclasses list the camelCase keys they edit in ``KEYS``; editors are
    built from ``PARAM_SPECS``.  ``changed`` carries ``{key: value}`` once an
    edit is finished.
    """

    changed = QtCore.pyqtSignal(dict)
    KEYS: tuple = ()

    def __init__(self):
        super().__init__()
        self._defaults = DEFAULTS
        self.editors = {}
        self.rows = {}
        fl = QtWidgets.QFormLayout(self)
        for key in self.KEYS:
            spec = PARAM_SPECS[key]
            editor = self._make_editor(key, spec)
            self.editors[key] = editor
            self.rows[key] = add_param_row(fl, key, editor, self._reset_one)

    def _make_editor(self, key: str, spec: dict) -> QtWidgets.QWidget:
        default = self._defaults[key]
        kind = spec["type"]
        if kind == "color":
            editor = ColorButton(default, spec["label"])
            editor.colorChanged.connect(lambda _c, k=key: self.emit_delta(k))
        elif kind == "count":
            editor = QtWidgets.QSpinBox()
            editor.setRange(int(spec["min"]), int(spec["max"]))
            editor.setSingleStep(1000)
            editor.setGroupSeparatorShown(True)
            editor.setKeyboardTracking(False)
            editor.setValue(int(default))
            editor.editingFinished.connect(lambda k=key: self.emit_delta(k))
        else:
            decimals = spec.get("decimals", 0) if kind == "double" else 0
            editor = SliderSpin(spec["min"], spec["max"], spec["step"], decimals, default)
            editor.editingFinished.connect(lambda k=key: self.emit_delta(k))
        return editor

    def _read(self, key: str):
        editor = self.editors[key]
        if isinstance(editor, ColorButton):
            return to_hex(editor.color())
        if isinstance(editor, QtWidgets.QSpinBox):
            return int(editor.value())
        value = editor.value()
        return int(round(value)) if isinstance(self._defaults[key], int) else float(value)

    def _write(self, key: str, value) -> None:
        editor = self.editors[key]
        with QtCore.QSignalBlocker(editor):
            if isinstance(editor, ColorButton):
                editor.setColor(value)
            elif isinstance(editor, QtWidgets.QSpinBox):
                editor.setValue(int(value))
            else:
                editor.setValue(float(value))

    def _reset_one(self, key: str) -> None:
        self._write(key, self._defaults[key])
        self.emit_delta(key)

    def emit_delta(self, key: str):
        self.changed.emit({key: self._read(key)})

    def collect(self) -> dict:
        return {key: self._read(key) for key in self.KEYS}

    def set_values(self, cfg):
        cfg = cfg or {}
        for key in self.KEYS:
            self._write(key, cfg.get(key, self._defaults[key]))
