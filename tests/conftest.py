"""
Shared test fixtures — test client, engine and the shipped extension template.
"""

import pytest
from fastapi.testclient import TestClient

from estimate_intake.main import app
from estimate_intake.question_trees.engine import QuestionTreeEngine


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def engine():
    return QuestionTreeEngine()


@pytest.fixture
def template(engine):
    """The single storey extension template."""
    return engine.load_template("single_storey_extension")


@pytest.fixture
def complete_answers():
    """An answer snapshot that completes every step of the extension template."""
    return {
        "propertyType": "semi-detached",
        "location": "rear",
        "sideAccess": True,
        "dimensions": {"length": 6, "width": 4},
        "knockThrough": False,
        "roofType": "flat",
        "roofSubTypeFlat": "warm-deck",
        "roofCovering": "epdm",
        "rooflightsCount": 0,
        "measurements": {"externalLengthM": 6, "externalWidthM": 4, "floorAreaM2": 24},
    }
