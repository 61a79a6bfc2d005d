# greenhouse_calc/ui/report_info_widget.py
from __future__ import annotations
from dataclasses import asdict

from PyQt5.QtCore import Qt, QDate
from PyQt5.QtWidgets import (
    QWidget, QFormLayout, QLineEdit, QLabel, QVBoxLayout, QHBoxLayout,
    QFrame, QSizePolicy, QPlainTextEdit, QGraphicsDropShadowEffect,
)

from ..reports.btu_report import ReportMeta


class ReportInfoWidget(QWidget):
    """
    "Card" editor for the details printed on the PDF report header.
    Nothing here is saved to disk except the designer name (via settings).
    """
    FIELDS = [
        ("project_title", "Project"),
        ("location", "Location"),
        ("designer", "Prepared by"),
        ("date", "Date"),
    ]

    def __init__(self, meta: ReportMeta | None = None, parent=None):
        super().__init__(parent)
        self._meta = meta or ReportMeta()
        if not self._meta.date:
            self._meta.date = QDate.currentDate().toString(Qt.ISODate)
        self._edits: dict[str, QLineEdit] = {}

        card = QFrame(self)
        card.setObjectName("card")
        card.setSizePolicy(QSizePolicy.Preferred, QSizePolicy.Maximum)
        card.setMaximumWidth(720)
        card.setFrameShape(QFrame.NoFrame)

        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(24)
        shadow.setOffset(0, 8)
        shadow.setColor(Qt.black)
        card.setGraphicsEffect(shadow)

        v = QVBoxLayout(card)
        v.setContentsMargins(28, 28, 28, 28)
        v.setSpacing(16)

        title = QLabel("Report details")
        title.setObjectName("title")
        v.addWidget(title)

        form_host = QWidget(card)
        form = QFormLayout(form_host)
        form.setLabelAlignment(Qt.AlignRight)
        form.setContentsMargins(0, 0, 0, 0)
        form.setHorizontalSpacing(14)
        form.setVerticalSpacing(10)

        values = asdict(self._meta)
        for key, label in self.FIELDS:
            le = QLineEdit(str(values.get(key, "")))
            le.setObjectName("metaEdit")
            le.setPlaceholderText(label)
            le.textChanged.connect(lambda text, k=key: setattr(self._meta, k, text.strip()))
            form.addRow(label + ":", le)
            self._edits[key] = le

        self.ed_notes = QPlainTextEdit(self._meta.notes)
        self.ed_notes.setPlaceholderText("Notes printed at the end of the report")
        self.ed_notes.setMaximumHeight(120)
        self.ed_notes.textChanged.connect(self._on_notes)
        form.addRow("Notes:", self.ed_notes)

        v.addWidget(form_host)

        root = QVBoxLayout(self)
        root.setContentsMargins(24, 24, 24, 24)
        root.addStretch(1)
        row = QHBoxLayout()
        row.addStretch(1)
        row.addWidget(card, 0, Qt.AlignCenter)
        row.addStretch(1)
        root.addLayout(row)
        root.addStretch(2)

        self.setStyleSheet("""
            QWidget { background: qlineargradient(x1:0,y1:0, x2:1,y2:1, stop:0 #eef6ee, stop:1 #dfeadf); }
            #card {
                background: white;
                border-radius: 16px;
            }
            #title {
                font-family: 'Segoe UI', 'Helvetica', 'Arial';
                font-size: 20px;
                font-weight: 600;
                color: #0D4FA2;
                background: transparent;
            }
            QLineEdit#metaEdit, QPlainTextEdit {
                padding: 8px 10px;
                border: 1px solid #D9DEE5;
                border-radius: 8px;
                background: #FAFCFF;
            }
            QLineEdit#metaEdit:focus {
                border: 1px solid #4C94FF;
                background: #FFFFFF;
            }
        """)

    def _on_notes(self):
        self._meta.notes = self.ed_notes.toPlainText().strip()

    def meta(self) -> ReportMeta:
        return self._meta

    def missing_fields(self) -> list[str]:
        return [label for key, label in self.FIELDS if not str(getattr(self._meta, key, "")).strip()]
