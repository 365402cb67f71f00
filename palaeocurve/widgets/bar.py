from dataclasses import replace

from PySide6 import QtCore, QtWidgets

from palaeocurve.widgets.curve_overlay import CurveOverlayWidget


class Bar(QtWidgets.QToolBar):
    def __init__(self, overlay: CurveOverlayWidget):
        super().__init__()

        self.overlay = overlay
        self.setObjectName("Bar")
        self.setMovable(False)
        self.setFloatable(False)
        self.setIconSize(QtCore.QSize(18, 18))

        opts = overlay.options
        self.reset_button = QtWidgets.QPushButton("reset")
        self.tangents_box = QtWidgets.QCheckBox("tangents")
        self.tangents_box.setChecked(opts.show_tangents)
        self.normals_box = QtWidgets.QCheckBox("normals")
        self.normals_box.setChecked(opts.show_normals)
        self.maxima_box = QtWidgets.QCheckBox("max curvature")
        self.maxima_box.setChecked(opts.show_maximum_curvature_points)
        self.probe_spin = QtWidgets.QSpinBox()
        self.probe_spin.setRange(1, 4096)
        self.probe_spin.setValue(opts.probe_number)
        self.probe_spin.setPrefix("samples: ")

        self.addWidget(self.reset_button)
        self.addSeparator()
        self.addWidget(self.tangents_box)
        self.addWidget(self.normals_box)
        self.addWidget(self.maxima_box)
        self.addWidget(self.probe_spin)

        self.reset_button.clicked.connect(self._reset_curve)
        self.tangents_box.toggled.connect(self._apply_options)
        self.normals_box.toggled.connect(self._apply_options)
        self.maxima_box.toggled.connect(self._apply_options)
        self.probe_spin.valueChanged.connect(self._apply_options)

    @QtCore.Slot()
    def _reset_curve(self):
        self.overlay.clear()

    @QtCore.Slot()
    def _apply_options(self, *_):
        self.overlay.set_options(replace(
            self.overlay.options,
            show_tangents=self.tangents_box.isChecked(),
            show_normals=self.normals_box.isChecked(),
            show_maximum_curvature_points=self.maxima_box.isChecked(),
            probe_number=self.probe_spin.value(),
        ))
