import logging

from django.db import DatabaseError, DataError, IntegrityError, transaction

from camp import stages
from camp.models import Beneficiary, Event

logger = logging.getLogger(__name__)

# Fields a details edit may change; stage data is left to the stage tracker
EDITABLE_FIELDS = [
    "name",
    "father_name",
    "date_of_birth",
    "age",
    "address",
    "state",
    "phone_number",
    "aadhar_number",
    "type_of_aid",
]


def format_reg_number(sequence: int) -> str:
    return f"REG-{sequence:04d}"


def describe_store_error(error) -> str:
    """Turn a database error into a message a registration desk volunteer can act on."""
    text = str(error)
    if isinstance(error, DataError) or "value too long" in text:
        return (
            "One or more fields have text that is too long. "
            "Please shorten your input for fields like Name or Address."
        )
    if "NOT NULL" in text.upper():
        return "A required field was not provided. Please fill it out."
    if isinstance(error, IntegrityError) and ("unique" in text.lower() or "duplicate" in text):
        return "A beneficiary with this information already exists in the database."
    return f"Error: {text}. Please check your inputs."


class RegistrationService:
    """Service class for registering beneficiaries at an event and editing their details."""

    def register_beneficiary(self, event_id, details: dict) -> dict:
        """
        Register a new beneficiary at an event.

        The beneficiary receives the next sequential registration number of the
        event and starts at the before-photo stage.

        Args:
            event_id: The event scope
            details: Validated registration fields

        Returns:
            dict: Contains 'success' boolean and 'beneficiary' or 'message'
        """
        try:
            with transaction.atomic():
                event = Event.objects.select_for_update().filter(id=event_id).first()
                if not event:
                    return {
                        "success": False,
                        "code": "not_found",
                        "message": "Please select an event first",
                    }

                existing_count = Beneficiary.objects.filter(event=event).count()
                reg_number = format_reg_number(existing_count + 1)

                beneficiary = Beneficiary.objects.create(
                    event=event,
                    reg_number=reg_number,
                    camp_date=event.event_date,
                    current_step=stages.BEFORE_PHOTO,
                    completed_steps=[stages.REGISTRATION],
                    **details,
                )
        except DatabaseError as e:
            logger.error(f"Registration error for event {event_id}: {str(e)}")
            return {"success": False, "code": "store_error", "message": describe_store_error(e)}

        logger.info(f"Registered {beneficiary.reg_number} ({beneficiary.name}) at {event.event_name}")
        return {
            "success": True,
            "beneficiary": beneficiary,
            "message": f"Beneficiary registered successfully! Registration Number: {reg_number}",
        }

    def get_beneficiary(self, event_id, beneficiary_id):
        return Beneficiary.objects.filter(event_id=event_id, pk=beneficiary_id).first()

    def update_details(self, event_id, beneficiary_id, details: dict) -> dict:
        """
        Update the registration details of a beneficiary.

        Only registration fields are applied; stage state and payloads are
        ignored even if present.
        """
        beneficiary = self.get_beneficiary(event_id, beneficiary_id)
        if not beneficiary:
            return {
                "success": False,
                "code": "not_found",
                "message": f"Beneficiary {beneficiary_id} not found",
            }

        changed = [field for field in EDITABLE_FIELDS if field in details]
        for field in changed:
            setattr(beneficiary, field, details[field])

        # Stage columns are never written here
        update_fields = set(changed) | {"age", "type_of_aid", "type_of_aid_display", "updated_at"}
        try:
            beneficiary.save(update_fields=sorted(update_fields))
        except DatabaseError as e:
            logger.error(f"Error updating beneficiary {beneficiary.reg_number}: {str(e)}")
            return {"success": False, "code": "store_error", "message": describe_store_error(e)}

        logger.info(f"Updated details of {beneficiary.reg_number}: {', '.join(changed) or 'none'}")
        return {
            "success": True,
            "beneficiary": beneficiary,
            "message": "Beneficiary updated successfully!",
        }
