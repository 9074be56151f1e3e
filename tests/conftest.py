"""
Test configuration and shared fixtures
"""

import sys
import pytest
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from PyQt6.QtCore import QCoreApplication

from bluetelemetry.communication.telemetry_observer import (
    TelemetrySubject,
    reset_telemetry_subject,
)
from bluetelemetry.models.enums import Protocol
from bluetelemetry.models.registry import FieldRegistry


@pytest.fixture(scope='session')
def qapp():
    """Create QCoreApplication instance for all tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture(autouse=True)
def _fresh_subject():
    """Drop the global subject between tests."""
    reset_telemetry_subject()
    yield
    reset_telemetry_subject()


@pytest.fixture
def subject(qapp):
    return TelemetrySubject()


@pytest.fixture
def dv4_registry():
    return FieldRegistry.build(Protocol.DV4)


@pytest.fixture
def skynav_registry():
    return FieldRegistry.build(Protocol.SKYNAVIGATOR)
