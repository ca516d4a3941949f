"""Shared fixtures for quiver tests."""

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test (DEBUG and above)."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def resume_document():
    """Small resume document covering every scored section."""
    return {
        "basics": {"name": "Philip J. Fry", "label": "Delivery Boy"},
        "work": [
            {"name": "Planet Express", "position": "Delivery Boy", "startDate": "3000-01"},
            {"name": "Panucci's Pizza", "position": "Delivery Boy", "startDate": "1999-01"},
            {"name": "Applied Cryogenics", "position": "Test Subject", "startDate": "1999-12"},
        ],
        "projects": [
            {"name": "Holophonor Recital"},
            {"name": "Slurm Factory Tour"},
        ],
        "education": [
            {"institution": "Mars University", "endDate": "2019"},
            {"institution": "Brooklyn High School", "endDate": "1995-06"},
        ],
        "certificates": [{"name": "Space Pilot License"}],
        "skills": [
            {"name": "Technical", "keywords": ["Python", "Docker", "Holophonor"]},
            {"name": "Languages", "keywords": ["English", "Alien Language 1"]},
            {"name": "Soft", "keywords": ["Leadership"]},
        ],
    }
