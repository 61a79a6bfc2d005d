APP_NAME = "Greenhouse BTU Calculator"
APP_DIR_NAME = "GreenhouseCalc"
__version__ = "1.0.0"

SETTINGS_FILENAME = "settings.json"
CATALOG_FILENAME = "materials.csv"
