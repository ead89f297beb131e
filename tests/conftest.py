"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from datetime import date
from pathlib import Path

import pytest
import json

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def weather_responses(fixtures_dir):
    """Load sample OpenWeatherMap responses from fixtures."""
    data_file = fixtures_dir / "weather_responses.json"
    with open(data_file) as f:
        return json.load(f)


@pytest.fixture(scope="session")
def soil_report_text(fixtures_dir):
    """Load a sample plain-text soil report."""
    return (fixtures_dir / "soil_report.txt").read_text(encoding="utf-8")


@pytest.fixture
def today():
    """Fixed reference date."""
    return date(2024, 6, 30)


@pytest.fixture
def optimal_soil():
    """Soil values sitting exactly on every optimal value."""
    return {
        "pH": 6.5,
        "nitrogen": 40,
        "phosphorus": 20,
        "potassium": 200,
        "calcium": 1000,
        "magnesium": 100,
        "organicMatter": 4,
    }


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring API access"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
