from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from piper_runner.presentation.synthesis_worker import SynthesisWorker
from piper_runner.utils.logger import Logger


class MainWindow(QMainWindow):
    def __init__(self, worker: SynthesisWorker, *, logger: Logger):
        super().__init__()
        self.worker = worker
        self.logger = logger

        self.setWindowTitle("Piper Runner")
        self.resize(640, 420)

        self.text_input = QLineEdit()
        self.text_input.setPlaceholderText("Type something to say...")
        self.text_input.returnPressed.connect(self.on_speak)

        self.speak_button = QPushButton("Speak")
        self.speak_button.clicked.connect(self.on_speak)

        self.log_view = QTextEdit()
        self.log_view.setReadOnly(True)

        self.copy_button = QPushButton("Copy to Clipboard")
        self.copy_button.clicked.connect(self.on_copy_log)

        input_row = QHBoxLayout()
        input_row.addWidget(self.text_input)
        input_row.addWidget(self.speak_button)

        layout = QVBoxLayout()
        layout.addLayout(input_row)
        layout.addWidget(self.log_view)
        layout.addWidget(self.copy_button)

        central = QWidget()
        central.setLayout(layout)
        self.setCentralWidget(central)
        self.statusBar().showMessage("Ready")

        self.worker.log.connect(self.append_log)
        self.worker.busy_changed.connect(self.on_busy_changed)
        self.worker.clip_ready.connect(self.on_clip_ready)
        self.worker.failed.connect(self.on_failed)

    def on_speak(self) -> None:
        text = self.text_input.text().strip()
        if not text:
            return
        self.worker.request(text)

    def on_copy_log(self) -> None:
        QGuiApplication.clipboard().setText(self.logger.text())
        self.statusBar().showMessage("Log copied to clipboard")

    def on_busy_changed(self, busy: bool) -> None:
        self.speak_button.setEnabled(not busy)
        if busy:
            self.statusBar().showMessage("Synthesizing...")

    def on_clip_ready(self, duration: float) -> None:
        self.statusBar().showMessage(f"Playing {duration:.2f}s of audio")

    def on_failed(self, message: str) -> None:
        self.statusBar().showMessage(message)

    def append_log(self, text: str):
        self.log_view.append(text)
