import platform
import sys
import traceback
from PyQt5.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QLabel, QTextEdit, QPushButton, QApplication
from .logger import get_logger
from ..utils.paths import logs_dir
from ..version import APP_NAME, __version__


def error_report_text(exc_type, exc_value, tb) -> str:
    """Plain-text crash report: app/version/platform banner followed by the traceback."""
    banner = f"{APP_NAME} {__version__} (Python {platform.python_version()}, {platform.system()})"
    trace_str = "".join(traceback.format_exception(exc_type, exc_value, tb))
    return f"{banner}\n\n{trace_str}"


class TracebackDialog(QDialog):
    def __init__(self, exc_type, exc_value, tb, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"{APP_NAME}: unexpected error")
        self.resize(800, 500)

        layout = QVBoxLayout(self)
        info = QLabel(
            f"{APP_NAME} hit an error it could not handle. The details below are also "
            f"written to {logs_dir() / 'app.log'}."
        )
        info.setWordWrap(True)
        layout.addWidget(info)

        self.text = QTextEdit(self)
        self.text.setReadOnly(True)
        self.text.setLineWrapMode(QTextEdit.NoWrap)
        self.text.setPlainText(error_report_text(exc_type, exc_value, tb))
        layout.addWidget(self.text)

        buttons = QHBoxLayout()
        btn_copy = QPushButton("Copy to Clipboard")
        btn_copy.clicked.connect(lambda: QApplication.clipboard().setText(self.text.toPlainText()))
        buttons.addWidget(btn_copy)
        buttons.addStretch(1)
        btn = QPushButton("Close")
        btn.clicked.connect(self.accept)
        buttons.addWidget(btn)
        layout.addLayout(buttons)


_log = get_logger()


def install_excepthook():
    def handle(exc_type, exc, tb):
        _log.error("Unhandled exception in %s %s:", APP_NAME, __version__, exc_info=(exc_type, exc, tb))
        app = QApplication.instance()
        if app is None:
            # Fallback to console
            sys.stderr.write(error_report_text(exc_type, exc, tb))
        else:
            dlg = TracebackDialog(exc_type, exc, tb)
            dlg.exec_()
    sys.excepthook = handle
