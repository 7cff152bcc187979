"""
Unit tests for RegistrationService and EventService.
"""

import uuid
from datetime import date

import pytest
from django.db import DataError, IntegrityError

from camp import stages
from camp.models import Beneficiary, Event
from camp.services.event_service import EventService
from camp.services.registration_service import RegistrationService, describe_store_error
from camp.signals import age_on


@pytest.mark.django_db
class TestRegistration:
    """Test cases for registering beneficiaries."""

    def setup_method(self):
        """Set up test dependencies."""
        self.service = RegistrationService()

    def test_register_starts_at_before_photo(self, event, sample_beneficiary_data):
        """Test register starts at before photo."""
        result = self.service.register_beneficiary(event.id, sample_beneficiary_data)

        assert result["success"] is True
        beneficiary = result["beneficiary"]
        assert beneficiary.reg_number == "REG-0001"
        assert beneficiary.current_step == stages.BEFORE_PHOTO
        assert beneficiary.completed_steps == [stages.REGISTRATION]
        assert beneficiary.camp_date == event.event_date
        assert "REG-0001" in result["message"]

    def test_reg_numbers_are_sequential_per_event(
        self, event, create_event, sample_beneficiary_data
    ):
        """Test reg numbers are sequential per event."""
        other_event = create_event(event_name="Udaipur Camp")
        self.service.register_beneficiary(event.id, sample_beneficiary_data)
        self.service.register_beneficiary(other_event.id, sample_beneficiary_data)

        result = self.service.register_beneficiary(event.id, sample_beneficiary_data)

        assert result["beneficiary"].reg_number == "REG-0002"
        assert Beneficiary.objects.get(event=other_event).reg_number == "REG-0001"

    def test_register_without_event(self, db, sample_beneficiary_data):
        """Test register without event."""
        result = self.service.register_beneficiary(uuid.uuid4(), sample_beneficiary_data)

        assert result["success"] is False
        assert result["code"] == "not_found"
        assert Beneficiary.objects.count() == 0

    def test_register_stores_aid_display(self, event, sample_beneficiary_data):
        """Test register stores aid display."""
        result = self.service.register_beneficiary(event.id, sample_beneficiary_data)

        beneficiary = result["beneficiary"]
        assert beneficiary.type_of_aid_display == "Left Below Knee, Stick (Qty: 2)"

    def test_register_derives_age_from_birth_date(self, event, sample_beneficiary_data):
        """Test register derives age from birth date."""
        data = {**sample_beneficiary_data, "date_of_birth": date(1990, 1, 1), "age": 5}

        result = self.service.register_beneficiary(event.id, data)

        beneficiary = result["beneficiary"]
        assert beneficiary.age >= 35

    def test_register_clears_other_text_when_not_selected(self, event, sample_beneficiary_data):
        """Test register clears other text when not selected."""
        data = {
            **sample_beneficiary_data,
            "type_of_aid": {"others": False, "others_specify": "Hearing aid"},
        }

        beneficiary = self.service.register_beneficiary(event.id, data)["beneficiary"]

        assert beneficiary.type_of_aid["others_specify"] == ""

    def test_age_on(self):
        """Test age on."""
        assert age_on(date(2000, 6, 15), date(2026, 6, 14)) == 25
        assert age_on(date(2000, 6, 15), date(2026, 6, 15)) == 26
        assert age_on(date(2030, 1, 1), date(2026, 6, 15)) == 0


@pytest.mark.django_db
class TestUpdateDetails:
    """Test cases for editing registration details."""

    def setup_method(self):
        """Set up test dependencies."""
        self.service = RegistrationService()

    def test_update_details(self, event, create_beneficiary):
        """Test update details."""
        beneficiary = create_beneficiary(stages.FITMENT)

        result = self.service.update_details(
            event.id,
            beneficiary.id,
            {"name": "Ramesh K.", "type_of_aid": {"walker": True}},
        )

        assert result["success"] is True
        beneficiary.refresh_from_db()
        assert beneficiary.name == "Ramesh K."
        assert beneficiary.type_of_aid_display == "Walker"

    def test_update_details_ignores_stage_fields(self, event, create_beneficiary):
        """Test update details ignores stage fields."""
        beneficiary = create_beneficiary(stages.FITMENT)

        self.service.update_details(
            event.id,
            beneficiary.id,
            {"current_step": stages.COMPLETED, "fitment_data": {"comfort_level": "good"}},
        )

        beneficiary.refresh_from_db()
        assert beneficiary.current_step == stages.FITMENT
        assert beneficiary.fitment_data is None

    def test_update_details_does_not_overwrite_stage_progress(self, event, create_beneficiary):
        """Test update details does not overwrite stage progress."""
        beneficiary = create_beneficiary(stages.FITMENT)
        Beneficiary.objects.filter(pk=beneficiary.pk).update(current_step=stages.EXTRA_ITEMS)

        # The service loads a fresh copy, but saving must not touch current_step
        self.service.update_details(event.id, beneficiary.id, {"state": "Gujarat"})

        beneficiary.refresh_from_db()
        assert beneficiary.current_step == stages.EXTRA_ITEMS
        assert beneficiary.state == "Gujarat"

    def test_update_missing_beneficiary(self, event):
        """Test update missing beneficiary."""
        result = self.service.update_details(event.id, uuid.uuid4(), {"name": "X"})

        assert result["success"] is False
        assert result["code"] == "not_found"


class TestDescribeStoreError:
    """Test cases for readable store error messages."""

    def test_value_too_long(self):
        """Test value too long."""
        message = describe_store_error(DataError("value too long for type character varying(20)"))
        assert "too long" in message

    def test_duplicate(self):
        """Test duplicate."""
        message = describe_store_error(
            IntegrityError("duplicate key value violates unique constraint")
        )
        assert "already exists" in message

    def test_not_null(self):
        """Test not null."""
        message = describe_store_error(IntegrityError("NOT NULL constraint failed: name"))
        assert "required" in message


@pytest.mark.django_db
class TestEventService:
    """Test cases for camp events."""

    def setup_method(self):
        """Set up test dependencies."""
        self.service = EventService()

    def test_create_event(self, sample_event_data):
        """Test create event."""
        result = self.service.create_event(sample_event_data)

        assert result["success"] is True
        assert Event.objects.filter(event_name="Jaipur Limb Camp").exists()

    def test_events_listed_newest_first(self, create_event):
        """Test events listed newest first."""
        create_event(event_name="Old", event_date=date(2025, 1, 1))
        create_event(event_name="New", event_date=date(2026, 1, 1))

        names = [e.event_name for e in self.service.list_events()]

        assert names == ["New", "Old"]

    def test_update_event(self, event):
        """Test update event."""
        result = self.service.update_event(event.id, {"location": "Ajmer"})

        assert result["success"] is True
        event.refresh_from_db()
        assert event.location == "Ajmer"

    def test_delete_event_removes_beneficiaries(self, event, create_beneficiary):
        """Test delete event removes beneficiaries."""
        create_beneficiary()

        result = self.service.delete_event(event.id)

        assert result["success"] is True
        assert Beneficiary.objects.count() == 0

    def test_delete_missing_event(self, db):
        """Test delete missing event."""
        result = self.service.delete_event(uuid.uuid4())

        assert result["success"] is False
