import argparse
import logging
import sys

from PySide6 import QtCore, QtGui, QtWidgets

from palaeocurve.core import CurveEditor, load_options
from palaeocurve.widgets import Bar, CurveOverlayWidget

logger = logging.getLogger(__name__)


class MyWidget(QtWidgets.QWidget):
    def __init__(self, editor: CurveEditor, image: str | None = None):
        super().__init__()

        self.layout = QtWidgets.QVBoxLayout(self)

        self.canvas = CurveOverlayWidget(editor, parent=self)
        if image:
            pixmap = QtGui.QPixmap(image)
            if pixmap.isNull():
                logger.warning("Could not open image %s", image)
            else:
                self.canvas.set_background(pixmap)

        self.scroll = QtWidgets.QScrollArea(self)
        self.scroll.setWidget(self.canvas)
        self.scroll.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.top_bar = Bar(self.canvas)

        self.layout.addWidget(self.top_bar, alignment=QtCore.Qt.AlignmentFlag.AlignTop)
        self.layout.addWidget(self.scroll)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bezier curve tool for locating maximum curvature.")
    parser.add_argument("image", nargs="?", help="image to draw over")
    parser.add_argument("--options", default=None, help="JSON options file")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    options = load_options(args.options) if args.options else None

    app = QtWidgets.QApplication(sys.argv[:1])
    widget = MyWidget(CurveEditor(options), args.image)
    widget.resize(800, 600)
    widget.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
