# app.py
import sys
from pathlib import Path

from PyQt5 import QtWidgets, QtGui, QtCore

from icon_errors import IconError, NoSourceImage
from icon_pipeline import ExportRequest, default_filename, export_to_file
from icon_settings import DEFAULT_SIZE, PRESET_SIZES, SOURCE_FILTER
from pixel_buffer import load

PROJECT_DIR = Path.cwd()
APP_TITLE = "IconEditor"
PREVIEW_SIZE = 256
CUSTOM_SIZE_ID = 0


def buffer_to_pixmap(buffer):
    image = QtGui.QImage(buffer.pixels.data, buffer.width, buffer.height,
                         buffer.width * 4, QtGui.QImage.Format_RGBA8888)
    # QImage only borrows the numpy memory
    return QtGui.QPixmap.fromImage(image.copy())


# -------------------------
# Worker thread for export
# -------------------------
class ExportWorker(QtCore.QThread):
    status = QtCore.pyqtSignal(str)
    finished = QtCore.pyqtSignal(str)          # output_path
    error = QtCore.pyqtSignal(str)

    def __init__(self, request: ExportRequest, output_path: str, parent=None):
        super().__init__(parent)
        self.request = request
        self.output_path = output_path

    def run(self):
        try:
            export_to_file(self.request, self.output_path, progress=self.status.emit)
        except Exception as e:
            self.error.emit(str(e) or type(e).__name__)
            return
        self.finished.emit(self.output_path)


# -------------------------
# Drop target
# -------------------------
class DropArea(QtWidgets.QLabel):
    fileDropped = QtCore.pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setAlignment(QtCore.Qt.AlignCenter)
        self.setFixedSize(PREVIEW_SIZE, PREVIEW_SIZE)
        self._set_hover(False)
        self.setText("Drop an image here")

    def _set_hover(self, hovering):
        color = "#3b82f6" if hovering else "#888888"
        self.setStyleSheet(f"border: 2px dashed {color}; border-radius: 12px;")

    def dragEnterEvent(self, event):
        urls = event.mimeData().urls()
        if urls and urls[0].isLocalFile():
            self._set_hover(True)
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event):
        self._set_hover(False)

    def dropEvent(self, event):
        self._set_hover(False)
        urls = event.mimeData().urls()
        if urls and urls[0].isLocalFile():
            self.fileDropped.emit(urls[0].toLocalFile())
            event.acceptProposedAction()


# -------------------------
# UI
# -------------------------
class MainWindow(QtWidgets.QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.setMinimumSize(640, 380)

        root = QtWidgets.QHBoxLayout(self)
        root.setSpacing(30)

        # image area
        left = QtWidgets.QVBoxLayout()
        self.drop_area = DropArea()
        self.drop_area.fileDropped.connect(self.load_image)
        left.addWidget(self.drop_area)

        self.choose_btn = QtWidgets.QPushButton("Choose Image")
        self.choose_btn.clicked.connect(self.choose_image)
        left.addWidget(self.choose_btn)
        left.addStretch()
        root.addLayout(left)

        # controls
        right = QtWidgets.QVBoxLayout()
        right.addWidget(QtWidgets.QLabel("Target size:"))

        self.size_group = QtWidgets.QButtonGroup(self)
        for size in PRESET_SIZES:
            radio = QtWidgets.QRadioButton(f"{size}x{size}")
            self.size_group.addButton(radio, size)
            right.addWidget(radio)
            if size == DEFAULT_SIZE:
                radio.setChecked(True)
        custom_radio = QtWidgets.QRadioButton("Custom")
        self.size_group.addButton(custom_radio, CUSTOM_SIZE_ID)
        right.addWidget(custom_radio)
        self.size_group.buttonToggled.connect(self.on_size_changed)

        self.custom_row = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(self.custom_row)
        h.setContentsMargins(0, 0, 0, 0)
        self.width_edit = QtWidgets.QLineEdit()
        self.width_edit.setPlaceholderText("W")
        self.width_edit.setFixedWidth(60)
        h.addWidget(self.width_edit)
        h.addWidget(QtWidgets.QLabel("x"))
        self.height_edit = QtWidgets.QLineEdit()
        self.height_edit.setPlaceholderText("H")
        self.height_edit.setFixedWidth(60)
        h.addWidget(self.height_edit)
        self.custom_row.setVisible(False)
        right.addWidget(self.custom_row)

        self.round_check = QtWidgets.QCheckBox("Round corners")
        self.round_check.setToolTip("Clip the icon corners with a radius of 17.54% of the width")
        right.addWidget(self.round_check)

        self.export_btn = QtWidgets.QPushButton("Export Icon")
        self.export_btn.setEnabled(False)
        self.export_btn.clicked.connect(self.start_export)
        right.addWidget(self.export_btn)

        self.status = QtWidgets.QLabel("Idle")
        self.status.setWordWrap(True)
        right.addWidget(self.status)
        right.addStretch()
        root.addLayout(right)

        self.source = None
        self.source_path = None
        self.worker = None

    def is_custom_size(self):
        return self.size_group.checkedId() == CUSTOM_SIZE_ID

    def on_size_changed(self, button, checked):
        if checked:
            self.custom_row.setVisible(self.is_custom_size())

    def choose_image(self):
        f, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Select image", str(PROJECT_DIR), SOURCE_FILTER)
        if f:
            self.load_image(f)

    def load_image(self, path):
        try:
            source = load(path)
        except IconError as e:
            self.on_error(str(e))
            return
        self.source = source
        self.source_path = Path(path)
        px = buffer_to_pixmap(source).scaled(PREVIEW_SIZE, PREVIEW_SIZE,
                                             QtCore.Qt.KeepAspectRatio, QtCore.Qt.SmoothTransformation)
        self.drop_area.setPixmap(px)
        self.choose_btn.setText("Change Image")
        self.export_btn.setEnabled(True)
        self.status.setText(f"Loaded: {self.source_path.name} ({source.width}x{source.height})")

    def size_arguments(self):
        if self.is_custom_size():
            return {"custom_width": self.width_edit.text(), "custom_height": self.height_edit.text()}
        return {"preset": self.size_group.checkedId()}

    def start_export(self):
        if self.source is None:
            self.on_error(str(NoSourceImage()))
            return
        size_kwargs = self.size_arguments()
        try:
            request = ExportRequest.create(self.source, round_corners=self.round_check.isChecked(),
                                           **size_kwargs)
        except IconError as e:
            self.on_error(str(e))
            return

        start_dir = self.source_path.parent if self.source_path else PROJECT_DIR
        suggested = str(start_dir / default_filename(**size_kwargs))
        out, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export icon", suggested, "PNG Image (*.png)")
        if not out:
            return
        if not out.lower().endswith(".png"):
            out += ".png"

        self.set_busy(True)
        self.worker = ExportWorker(request, out)
        self.worker.status.connect(self.status.setText)
        self.worker.finished.connect(self.on_finished)
        self.worker.error.connect(self.on_error)
        self.worker.start()

    def set_busy(self, busy):
        self.choose_btn.setEnabled(not busy)
        self.export_btn.setEnabled(not busy and self.source is not None)
        self.drop_area.setAcceptDrops(not busy)

    def on_finished(self, output_path):
        self.status.setText("Saved: " + output_path)
        self.set_busy(False)

    def on_error(self, text):
        QtWidgets.QMessageBox.critical(self, "Error", text)
        self.status.setText("Error: " + text)
        self.set_busy(False)


def main():
    app = QtWidgets.QApplication(sys.argv)
    win = MainWindow()
    win.show()
    sys.exit(app.exec_())

if __name__ == "__main__":
    main()
