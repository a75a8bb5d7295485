# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for Concentration Heatmap tests."""

import os
from pathlib import Path
from typing import Generator

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Set test environment variables before importing the packages
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("DISABLE_LOGGING", "1")
os.environ.setdefault("HEATMAP_DATA_PATH", str(FIXTURES_DIR / "personnes.json"))


@pytest.fixture
def fixture_document_path() -> Path:
    """Path of the sample document with a mix of valid and broken entries."""
    return FIXTURES_DIR / "personnes.json"


@pytest.fixture
def test_client() -> Generator:
    """Create a test client for the FastAPI application."""
    from fastapi.testclient import TestClient

    from api.cache import cache_clear
    from api.main import app

    cache_clear()
    with TestClient(app) as client:
        yield client
    cache_clear()


@pytest.fixture
def home_entry() -> dict:
    """Raw entry in the underscore naming used by the spreadsheet export."""
    return {
        "nom": "Dupont",
        "prenom": "Marie",
        "adresse_domicile": "15 rue de la Paix, 75001 Paris",
        "adresse_etablissement": "Université Paris 1",
        "ville": "Paris",
        "code_postal": "75001",
        "coordinates_domicile": [48.8566, 2.3522],
        "coordinates_etablissement": [48.8467, 2.3431],
    }


@pytest.fixture
def camel_entry() -> dict:
    """Same kind of entry in camelCase naming."""
    return {
        "nom": "Martin",
        "prenom": "Pierre",
        "adresseDomicile": "23 avenue Victor Hugo, 69003 Lyon",
        "adresseEtablissement": "Université Lyon 3",
        "ville": "Lyon",
        "codePostal": "69003",
        "coordinatesDomicile": {"latitude": 45.7640, "longitude": 4.8357},
        "coordinatesEtablissement": "45.7578, 4.8320",
    }


@pytest.fixture
def end_to_end_document() -> list:
    """Two entries, one with only a home location, one with only an institution."""
    return [
        {
            "nom": "Dupont",
            "adresse_domicile": "15 rue de la Paix",
            "coordinates_domicile": [48.8566, 2.3522],
        },
        {
            "prenom": "Jean",
            "adresse_etablissement": "Univ X",
            "coordinates_etablissement": [45.76, 4.83],
        },
    ]
