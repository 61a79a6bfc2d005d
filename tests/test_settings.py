import json

from greenhouse_calc.services.settings import SettingsManager


def test_defaults_written_on_first_use(tmp_path):
    path = tmp_path / "settings.json"
    s = SettingsManager(path)
    assert path.exists()
    assert s.catalog_csv is None
    assert s.chart_min_temp_span == 40
    assert json.loads(path.read_text(encoding="utf-8"))["report_designer"] == ""


def test_values_persist_between_instances(tmp_path):
    path = tmp_path / "settings.json"
    s = SettingsManager(path)
    s.catalog_csv = str(tmp_path / "materials.csv")
    s.set("report_designer", "J. Grower")

    again = SettingsManager(path)
    assert again.catalog_csv == str(tmp_path / "materials.csv")
    assert again.get("report_designer") == "J. Grower"


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    s = SettingsManager(path)
    assert s.get("last_report_dir") == ""
    assert s.chart_min_temp_span == 40


def test_partial_file_is_filled_with_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"chart_min_temp_span": "bogus"}), encoding="utf-8")
    s = SettingsManager(path)
    assert s.chart_min_temp_span == 40
    assert s.catalog_csv is None
