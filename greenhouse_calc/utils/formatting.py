def format_btu(value) -> str:
    """12345 -> '12,345 BTU/hr'"""
    return f"{int(value):,} BTU/hr"


def format_area(value: float) -> str:
    return f"{value:,.1f} sq ft"
