"""Pytest configuration and fixtures for huereminders tests."""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from huereminders.api.http_client import HttpClient
from huereminders.models.color import LightColor
from huereminders.models.light import Bridge, Light
from huereminders.models.reminder import AlertStyle, Reminder


@pytest.fixture
def bridge():
    """A paired bridge."""
    return Bridge(address="192.168.1.20", username="abc123")


@pytest.fixture
def teal():
    return LightColor(hue=0.5, saturation=1.0, brightness=1.0)


@pytest.fixture
def reminder(bridge, teal):
    """A color reminder on two lights that have no schedule yet."""
    return Reminder(
        name="Wake up",
        lights={Light(light_id="1"), Light(light_id="2")},
        active=True,
        alert=AlertStyle.COLOR,
        author="Alice Long Name",
        time=datetime(2026, 10, 18, 7, 30),
        bridge=bridge,
        color=teal,
    )


@pytest.fixture
def mock_client():
    """An HttpClient whose send() is a MagicMock."""
    client = MagicMock(spec=HttpClient)
    client.send.return_value = []
    return client
