import sys
from PyQt5.QtWidgets import QApplication
from greenhouse_calc.services.settings import SettingsManager
from greenhouse_calc.services.traceback_dialog import install_excepthook
from greenhouse_calc.ui.main_window import MainWindow


def run():
    install_excepthook()
    app = QApplication(sys.argv)
    settings = SettingsManager()
    win = MainWindow(settings)
    win.show()
    sys.exit(app.exec_())
