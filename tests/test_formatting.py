from greenhouse_calc.utils.formatting import format_area, format_btu


def test_format_btu_uses_thousands_separator():
    assert format_btu(32122) == "32,122 BTU/hr"
    assert format_btu(0) == "0 BTU/hr"


def test_format_area():
    assert format_area(492.5) == "492.5 sq ft"
    assert format_area(1234.56) == "1,234.6 sq ft"
