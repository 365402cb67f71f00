import math
from typing import override

from PySide6 import QtCore, QtGui, QtWidgets

from palaeocurve.core import CurveEditor, CurveOptions, CurveSnapshot, Point


def _qpoint(p: Point) -> QtCore.QPointF:
    return QtCore.QPointF(float(p[0]), float(p[1]))


class CurveOverlayWidget(QtWidgets.QWidget):
    """
    Image view with the curve tool on top.
    Mouse events are reduced to image coordinates and handed to a CurveEditor;
    painting reads the editor's snapshot.
    """

    curveChanged = QtCore.Signal()

    def __init__(self, editor: CurveEditor | None = None, parent=None):
        super().__init__(parent)
        self._editor = editor or CurveEditor()
        self._background = QtGui.QPixmap()
        self._moved = False

        self.setMouseTracking(True)
        self.setCursor(QtCore.Qt.CursorShape.CrossCursor)

    # ---- accessors ----------------------------------------------------------
    @property
    def editor(self) -> CurveEditor:
        return self._editor

    @property
    def options(self) -> CurveOptions:
        return self._editor.options

    def set_options(self, options: CurveOptions) -> None:
        self._editor.set_options(options)
        self.update()

    def set_background(self, pixmap: QtGui.QPixmap) -> None:
        self._background = pixmap
        if not pixmap.isNull():
            self.setFixedSize(pixmap.size())
        self.update()

    def clear(self) -> None:
        self._editor.clear()
        self.update()

    # ---- Qt plumbing --------------------------------------------------------
    @override
    def update(self):
        self.curveChanged.emit()
        super().update()

    def sizeHint(self):
        if not self._background.isNull():
            return self._background.size()
        return QtCore.QSize(800, 600)

    # ---- mouse events -------------------------------------------------------
    @staticmethod
    def _image_pos(e: QtGui.QMouseEvent) -> tuple[float, float]:
        pos = e.position()
        return float(pos.x()), float(pos.y())

    def mousePressEvent(self, e: QtGui.QMouseEvent):
        if e.button() != QtCore.Qt.MouseButton.LeftButton:
            return
        x, y = self._image_pos(e)
        mods = e.modifiers()
        self._moved = False
        self._editor.press(
            x, y,
            shift=bool(mods & QtCore.Qt.KeyboardModifier.ShiftModifier),
            ctrl=bool(mods & QtCore.Qt.KeyboardModifier.ControlModifier),
        )
        self.update()

    def mouseMoveEvent(self, e: QtGui.QMouseEvent):
        x, y = self._image_pos(e)
        if not (e.buttons() & QtCore.Qt.MouseButton.LeftButton):
            hit = None if self._editor.chain.is_empty() else self._editor.hit(x, y)
            self.setCursor(QtCore.Qt.CursorShape.SizeAllCursor if hit is not None
                           else QtCore.Qt.CursorShape.CrossCursor)
            return
        self._moved = True
        self._editor.drag(x, y)
        self.update()

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent):
        if e.button() != QtCore.Qt.MouseButton.LeftButton:
            return
        x, y = self._image_pos(e)
        self._editor.release(x, y)
        if not self._moved:
            # a press/release without movement is a click
            alt = bool(e.modifiers() & QtCore.Qt.KeyboardModifier.AltModifier)
            self._editor.click(x, y, alt=alt)
        self.update()

    # ---- painting -----------------------------------------------------------
    def _make_path(self, snapshot: CurveSnapshot) -> QtGui.QPainterPath:
        path = QtGui.QPainterPath()
        for op, data in snapshot.path_ops:
            if op == "M":
                if path.isEmpty():
                    path.moveTo(_qpoint(data))
            elif op == "C":
                c1, c2, p3 = data
                path.cubicTo(_qpoint(c1), _qpoint(c2), _qpoint(p3))
        return path

    def _draw_control_points(self, p: QtGui.QPainter, snapshot: CurveSnapshot):
        r = float(self.options.control_point_width)
        coords = snapshot.control_points
        for i in range(0, len(coords) - 1, 2):
            anchor, handle = coords[i], coords[i + 1]
            p.setPen(QtGui.QPen(QtGui.QColor("red"), 1.0))
            p.setBrush(QtGui.QColor("red"))
            p.drawEllipse(QtCore.QRectF(anchor[0] - r / 2, anchor[1] - r / 2, r, r))

            p.setPen(QtGui.QPen(QtGui.QColor("blue"), 1.0))
            p.setBrush(QtCore.Qt.BrushStyle.NoBrush)
            p.drawEllipse(QtCore.QRectF(handle[0] - r / 2, handle[1] - r / 2, r, r))
            p.drawLine(_qpoint(anchor), _qpoint(handle))

    def _draw_vectors(self, p: QtGui.QPainter, origins, vectors, scale: float, color: str):
        p.setPen(QtGui.QPen(QtGui.QColor(color), 1.0))
        for segment_origins, segment_vectors in zip(origins, vectors):
            for (x, y), (vx, vy) in zip(segment_origins, segment_vectors):
                if not (math.isfinite(vx) and math.isfinite(vy)):
                    continue
                p.drawLine(QtCore.QPointF(x, y), QtCore.QPointF(x + vx * scale, y + vy * scale))

    def _draw_peaks(self, p: QtGui.QPainter, snapshot: CurveSnapshot):
        opts = self.options
        font = QtGui.QFont("Arial", 10)
        p.setFont(font)
        for peak in snapshot.peaks:
            p.setPen(QtGui.QPen(QtGui.QColor(opts.maximum_curvature_stroke), 1.0))
            p.setBrush(QtGui.QColor(opts.maximum_curvature_fill))
            p.drawEllipse(QtCore.QRectF(peak.x - 2, peak.y - 2, 4, 4))

            label = f"{peak.fraction * 100:.5g}%"
            rect = QtGui.QFontMetricsF(font).boundingRect(label)
            rect.moveTopLeft(QtCore.QPointF(peak.x + 5, peak.y + 5))
            p.fillRect(rect, QtGui.QColor("white"))
            p.setPen(QtGui.QColor("black"))
            p.drawText(rect, label)

    def paintEvent(self, _):
        p = QtGui.QPainter(self)
        p.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        if not self._background.isNull():
            p.drawPixmap(0, 0, self._background)

        snapshot = self._editor.snapshot
        opts = self.options
        self._draw_control_points(p, snapshot)

        if snapshot.has_curve:
            p.setPen(QtGui.QPen(QtGui.QColor("yellow"), 1.5))
            p.setBrush(QtCore.Qt.BrushStyle.NoBrush)
            p.drawPath(self._make_path(snapshot))

            if opts.show_tangents:
                self._draw_vectors(p, snapshot.coordinates, snapshot.tangents, opts.tangent_scale, "green")
            if opts.show_normals:
                self._draw_vectors(p, snapshot.coordinates, snapshot.normals, opts.normal_scale, "pink")
            if opts.show_maximum_curvature_points:
                self._draw_peaks(p, snapshot)

        p.end()
