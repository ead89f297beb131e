"""
Command-line integration tests.

Runs the CLI end to end against a temporary state file. Weather requests are
patched out.
"""

import json
import pytest
from unittest.mock import patch

from src.lawn_tracker.main import LawnTrackerApp, main, to_json
from src.lawn_tracker.api import ProviderError
from src.lawn_tracker.models import Settings, WeatherSnapshot


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    """Write a configuration pointing at a temporary state file."""
    for name in ("OPENWEATHER_API_KEY", "WEATHER_API_KEY", "OPENAI_API_KEY", "LAWN_STORAGE_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "test.log"))

    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "weather": {"base_url": "https://api.openweathermap.org/data/2.5", "api_key": "test"},
        "soil_analyzer": {"base_url": "https://api.openai.com/v1", "model": "gpt-4o"},
        "storage": {"path": str(tmp_path / "lawn_data.json")},
        "processing": {"timezone": "UTC"},
    }))
    return str(path)


def run_cli(capsys, *argv):
    """Run the CLI and decode its JSON output."""
    main(list(argv))
    return json.loads(capsys.readouterr().out)


@pytest.mark.integration
class TestCommandLine:
    """End-to-end CLI scenarios."""

    def test_application_lifecycle(self, config_path, capsys):
        added = run_cli(
            capsys, "--config", config_path, "add-application", "fertilizer",
            "--date", "2024-05-01", "--rate", "3.5", "--product", "Milorganite", "--npk", "6-4-0"
        )
        assert added["kind"] == "fertilizer"
        assert added["date"] == "2024-05-01"
        assert added["npk"] == "6-4-0"

        edited = run_cli(
            capsys, "--config", config_path, "edit-application", str(added["id"]), "iron",
            "--date", "2024-05-02", "--rate", "2", "--product", "Ironite"
        )
        assert edited["id"] == added["id"]
        assert edited["kind"] == "iron"
        assert edited["npk"] is None

        listed = run_cli(capsys, "--config", config_path, "list-applications", "--kind", "iron")
        assert [a["id"] for a in listed] == [added["id"]]

        deleted = run_cli(capsys, "--config", config_path, "delete-application", str(added["id"]))
        assert deleted == {"deleted": True}
        assert run_cli(capsys, "--config", config_path, "list-applications") == []

    def test_invalid_application(self, config_path, capsys):
        with pytest.raises(SystemExit):
            main(["--config", config_path, "add-application", "pgr", "--date", "2024-05-01", "--rate", "-1"])
        assert "Invalid application" in capsys.readouterr().out

    def test_soil_entry_and_history(self, config_path, capsys):
        run_cli(capsys, "--config", config_path, "add-soil", "--date", "2024-01-10", "--pH", "6.1", "--nitrogen", "15")
        run_cli(capsys, "--config", config_path, "add-soil", "--date", "2024-04-10", "--pH", "6.3")

        history = run_cli(capsys, "--config", config_path, "soil-history")
        assert [m["values"]["pH"] for m in history] == [6.1, 6.3]

        series = run_cli(capsys, "--config", config_path, "soil-history", "--parameter", "nitrogen")
        assert series == [{"date": "2024-01-10", "value": 15.0}]

    def test_recommend(self, config_path, capsys):
        run_cli(capsys, "--config", config_path, "settings", "--grass-type", "Kentucky Bluegrass", "--zip-code", "53703")
        run_cli(capsys, "--config", config_path, "add-application", "pgr", "--date", "2024-06-20", "--rate", "0.38")
        run_cli(
            capsys, "--config", config_path, "add-application", "fertilizer",
            "--date", "2024-05-01", "--rate", "3", "--product", "Scotts Turf Builder"
        )

        weather = WeatherSnapshot(
            current_temp=80, current_humidity=55,
            forecast_avg_max_temp=85, forecast_avg_min_temp=65,
            location_city="Madison", location_zip="53703",
        )
        with patch("src.lawn_tracker.main.OpenWeatherMapAPI.fetch", return_value=weather):
            bundle = run_cli(capsys, "--config", config_path, "recommend", "--date", "2024-06-30")

        assert bundle["gdd_info"]["base_temp"] == 50
        assert bundle["gdd_info"]["current_gdd"] == 25
        # 25 GDD over 10 days -> 2.5/day -> 35 day interval
        assert bundle["gdd_info"]["next_estimate"]["days_until_next"] == 25
        # 6 months, cool season -> 5 months, 60 days elapsed
        assert bundle["fertilizer"]["interval_months"] == 5
        assert bundle["fertilizer"]["days_until_next"] == 90
        assert bundle["iron"] is None
        assert bundle["soil_analysis"] is None

    def test_recommend_survives_weather_failure(self, config_path):
        app = LawnTrackerApp(config_path)
        try:
            app.repository.save_settings(Settings(grass_type="Zoysiagrass", zip_code="53703"))
            with patch.object(app.weather_client, "fetch", side_effect=ProviderError("down")):
                bundle = app.recommend()
        finally:
            app.close()

        assert bundle.gdd_info is None

    def test_summary(self, config_path, capsys):
        run_cli(capsys, "--config", config_path, "settings", "--square-footage", "4000")
        run_cli(capsys, "--config", config_path, "add-application", "pgr", "--date", "2024-06-01", "--rate", "0.5")

        summary = run_cli(capsys, "--config", config_path, "list-applications", "--summary")
        assert summary["pgr"]["count"] == 1
        assert summary["pgr"]["total_used"] == pytest.approx(2.0)
        assert summary["iron"]["days_since_last"] is None


def test_to_json_handles_dates():
    weather = WeatherSnapshot(current_temp=70, current_humidity=40, forecast_avg_max_temp=75, forecast_avg_min_temp=55)
    assert json.loads(to_json(weather))["current_temp"] == 70
    assert json.loads(to_json({"a": 1})) == {"a": 1}
