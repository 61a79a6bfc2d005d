import sys

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from greenhouse_calc.core.errors import InvalidInputError
from greenhouse_calc.services.traceback_dialog import error_report_text
from greenhouse_calc.version import APP_NAME, __version__


def test_error_report_names_app_and_version():
    try:
        raise InvalidInputError("Roof R-value must be > 0 (got 0)")
    except InvalidInputError:
        text = error_report_text(*sys.exc_info())

    first_line = text.splitlines()[0]
    assert first_line.startswith(f"{APP_NAME} {__version__}")
    assert "Traceback (most recent call last)" in text
    assert "InvalidInputError: Roof R-value must be > 0 (got 0)" in text
