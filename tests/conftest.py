"""
Pytest configuration and shared fixtures for the test suite.
"""

import io
from datetime import date
from unittest.mock import Mock

import pytest
from PIL import Image

from camp import stages
from camp.models import Beneficiary, Event

# Payload values written for every stage a fixture beneficiary has passed
PASSED_STEP_FIELDS = {
    stages.BEFORE_PHOTO: {"before_photo_url": "https://storage.test/photos/before.jpg"},
    stages.MEASUREMENT: {
        "measurement_data": {"length": 40.0, "circumference": 30.0, "notes": ""}
    },
    stages.FITMENT: {
        "fitment_data": {"comfort_level": "good", "adjustments_made": "", "fitment_notes": ""}
    },
    stages.EXTRA_ITEMS: {"extra_items": [{"item": "stick", "quantity": 1}]},
    stages.AFTER_PHOTO: {"after_photo_url": "https://storage.test/photos/after.jpg"},
}


@pytest.fixture
def sample_event_data():
    """Sample event data for testing."""
    return {"event_name": "Jaipur Limb Camp", "event_date": date(2026, 11, 2), "location": "Jaipur"}


@pytest.fixture
def sample_beneficiary_data():
    """Sample registration details for testing."""
    return {
        "name": "Ramesh Kumar",
        "father_name": "Suresh Kumar",
        "address": "12 Station Road, Jaipur",
        "state": "Rajasthan",
        "phone_number": "9876543210",
        "aadhar_number": "123412341234",
        "type_of_aid": {"left_below_knee": True, "stick": True, "stick_qty": 2},
    }


@pytest.fixture
def create_event(db, sample_event_data):
    """Factory fixture to create a test event."""

    def _create_event(**kwargs):
        return Event.objects.create(**{**sample_event_data, **kwargs})

    return _create_event


@pytest.fixture
def event(create_event):
    return create_event()


@pytest.fixture
def create_beneficiary(db, event, sample_beneficiary_data):
    """
    Factory fixture to create a beneficiary waiting at ``step``.

    Every stage before ``step`` is recorded as completed with its payload set.
    """
    counter = {"value": 0}

    def _create_beneficiary(step=stages.BEFORE_PHOTO, event=event, **kwargs):
        counter["value"] += 1
        completed = [stages.REGISTRATION]
        payload_fields = {}
        volunteers = {}
        if step in stages.STEP_ORDER:
            for passed in stages.STEP_ORDER[1 : stages.STEP_ORDER.index(step)]:
                completed.append(passed)
                payload_fields.update(PASSED_STEP_FIELDS.get(passed, {}))
                volunteers[passed] = "Fixture Volunteer"

        data = {
            **sample_beneficiary_data,
            "event": event,
            "reg_number": f"REG-{counter['value']:04d}",
            "camp_date": event.event_date,
            "current_step": step,
            "completed_steps": completed,
            "step_volunteers": volunteers,
            **payload_fields,
            **kwargs,
        }
        return Beneficiary.objects.create(**data)

    return _create_beneficiary


@pytest.fixture
def mock_object_store_post(mocker):
    """Mock requests.post used by the object store client."""
    mock_post = mocker.patch("camp.storage.object_store.requests.post")
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.text = '{"Key": "photos/uploaded.jpg"}'
    mock_post.return_value = mock_response
    return mock_post


@pytest.fixture
def jpeg_bytes():
    """A small JPEG image."""

    def _jpeg_bytes(width=64, height=48, color=(200, 120, 40)):
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, format="JPEG")
        return buffer.getvalue()

    return _jpeg_bytes
