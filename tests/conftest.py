"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(scope="session")
def project_root():
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def main_rows():
    """Main ecosystem figures, deliberately out of year order."""
    return [
        {
            "Year": 2021,
            "Revenue": 8_000_000_000,
            "RevenueEarlyStage": 2_800_000_000,
            "Scaleup Revenue": 5_200_000_000,
            "Employees": 55000,
            "EmployeesInFinland": 41000,
            "Firms": 4000,
            "Number Startups": 3450,
            "Number Scaleups": 550,
        },
        {
            "Year": 2020,
            "Revenue": 7_000_000_000,
            "RevenueEarlyStage": 2_500_000_000,
            "Scaleup Revenue": 4_500_000_000,
            "Employees": 50000,
            "EmployeesInFinland": 38000,
            "Firms": 3800,
            "Number Startups": 3300,
            "Number Scaleups": 500,
        },
        {
            "Year": 2022,
            "Revenue": 9_500_000_000,
            "RevenueEarlyStage": 3_000_000_000,
            "Scaleup Revenue": 6_500_000_000,
            "Employees": 61250,
            "EmployeesInFinland": 45000,
            "Firms": 4200,
            "Number Startups": 3600,
            "Number Scaleups": 600,
        },
    ]


@pytest.fixture
def gender_rows():
    """Workforce composition counts with a female share column only."""
    return [
        {"Year": 2022, "Male": 33000, "Female": 14000, "Finnish background": 38000, "Foreign background": 9000, "ShareOfFemales": 0.2979},
        {"Year": 2020, "Male": 30000, "Female": 12000, "Finnish background": 35000, "Foreign background": 7000, "ShareOfFemales": 0.2857},
        {"Year": 2021, "Male": 31000, "Female": 13000, "Finnish background": 36000, "Foreign background": 8000, "ShareOfFemales": 0.2955},
    ]


@pytest.fixture
def rdi_rows():
    return [
        {"Year": 2022, "R&D-investments": 1_234_567_890},
        {"Year": 2021, "R&D-investments": 1_100_000_000},
    ]


@pytest.fixture
def barometer_rows():
    """Barometer balance figures with quarter labels out of order."""
    return [
        {
            "Time": "Q1/2023",
            "Financial situation, past 3 months": 4.0,
            "Financial situation, next 3 months": 12.0,
            "Number of employees, past 3 months": 8.0,
            "Number of employees, next 3 months": 15.0,
        },
        {
            "Time": "Q3/2022",
            "Financial situation, past 3 months": 0.0,
            "Financial situation, next 3 months": 9.5,
            "Number of employees, past 3 months": 6.0,
            "Number of employees, next 3 months": 11.0,
        },
        {
            "Time": "Q4/2022",
            "Financial situation, past 3 months": -3.5,
            "Financial situation, next 3 months": 7.0,
            "Number of employees, past 3 months": 2.0,
            "Number of employees, next 3 months": 10.0,
        },
    ]


@pytest.fixture
def unicorn_rows():
    return [
        {"Firm": "Wolt", "Last valuation": 8_000_000_000, "Finnish": 1, "Finnish background": 1},
        {"Firm": "Supercell", "Last valuation": 10_200_000_000, "Finnish": 1, "Finnish background": 1},
        {"Firm": "Oura", "Last valuation": 5_000_000_000, "Finnish": 0, "Finnish background": 1},
        {"Firm": "Unknown Oy", "Last valuation": "undisclosed"},
    ]


@pytest.fixture
def data_ctx(main_rows, gender_rows, rdi_rows, barometer_rows, unicorn_rows):
    """Loaded dashboard context as returned by load_dashboard_data."""
    return {
        "files": ["main-data.json"],
        "main": main_rows,
        "employees_gender": gender_rows,
        "rdi": rdi_rows,
        "barometer": barometer_rows,
        "unicorns": unicorn_rows,
    }
