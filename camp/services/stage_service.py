import logging

from django.db import DatabaseError
from django.utils import timezone

from camp import stages
from camp.models import Beneficiary, Event
from camp.payloads import validate_payload

logger = logging.getLogger(__name__)

INVALID = "invalid"
NOT_FOUND = "not_found"
CONFLICT = "conflict"
STORE_ERROR = "store_error"
OBJECT_STORE_ERROR = "object_store_error"


class StageService:
    """
    Applies stage transitions to beneficiaries of one event.

    Every transition is a single conditional UPDATE keyed on the beneficiary
    id and the step it is expected to be at, so a beneficiary that another
    volunteer already moved is reported as a conflict instead of being
    overwritten.
    """

    def list_at_step(self, event_id, step: str) -> dict:
        """
        List the beneficiaries of an event waiting at a stage.

        Args:
            event_id: The event scope
            step: Stage name to filter on

        Returns:
            dict: Contains 'success' and either 'beneficiaries' or 'message'
        """
        if not stages.is_known_step(step):
            return self._fail(INVALID, f"Unknown step: {step}")
        if not Event.objects.filter(id=event_id).exists():
            return self._fail(NOT_FOUND, f"Event {event_id} not found")

        beneficiaries = list(
            Beneficiary.objects.filter(event_id=event_id, current_step=step).order_by("created_at")
        )
        return {"success": True, "beneficiaries": beneficiaries}

    def advance(self, event_id, beneficiary_id, step: str, payload=None, volunteer=None) -> dict:
        """
        Complete ``step`` for a beneficiary and move it to the next stage.

        Args:
            event_id: The event scope
            beneficiary_id: The beneficiary's id
            step: The stage being completed
            payload: Stage payload, validated against the stage schema
            volunteer: Name of the volunteer performing the stage

        Returns:
            dict: Contains 'success', 'message' and, on success, 'beneficiary'
                and 'changed'
        """
        if step not in stages.WORK_STEPS:
            return self._fail(INVALID, f"Step {step} cannot be advanced")

        beneficiary = self.get_beneficiary(event_id, beneficiary_id)
        if beneficiary is None:
            return self._fail(NOT_FOUND, f"Beneficiary {beneficiary_id} not found")

        state_result = self._check_current_step(beneficiary, step)
        if state_result is not None:
            return state_result

        volunteer_errors = self._volunteer_errors(step, volunteer)
        fields, errors = validate_payload(step, payload)
        if errors or volunteer_errors:
            errors = {**(errors or {}), **volunteer_errors}
            logger.warning(f"Rejected {step} for {beneficiary.reg_number}: {errors}")
            return {
                "success": False,
                "code": INVALID,
                "message": f"Missing or invalid {stages.step_label(step)} details",
                "errors": errors,
            }

        return self._apply_advance(beneficiary, step, fields, volunteer)

    def complete_without_payload(
        self, event_id, beneficiary_id, step: str, volunteer=None
    ) -> dict:
        """
        Pass a photo stage without its photo.

        The stage's owned field stays empty; everything else is the same as a
        normal advance.
        """
        if step not in stages.SKIPPABLE_STEPS:
            return self._fail(INVALID, f"Step {step} cannot be completed without its details")

        beneficiary = self.get_beneficiary(event_id, beneficiary_id)
        if beneficiary is None:
            return self._fail(NOT_FOUND, f"Beneficiary {beneficiary_id} not found")

        state_result = self._check_current_step(beneficiary, step)
        if state_result is not None:
            return state_result

        volunteer_errors = self._volunteer_errors(step, volunteer)
        if volunteer_errors:
            return {
                "success": False,
                "code": INVALID,
                "message": "Volunteer name is required",
                "errors": volunteer_errors,
            }

        return self._apply_advance(beneficiary, step, {}, volunteer)

    def revert(self, event_id, beneficiary_id, step: str) -> dict:
        """
        Send a beneficiary at ``step`` back to the previous stage.

        Clears the fields owned by ``step`` and by the previous stage, and drops
        both from ``completed_steps`` and ``step_volunteers``, so the previous
        stage is redone from scratch.
        """
        if not stages.can_revert(step):
            return self._fail(INVALID, f"Step {step} cannot be reverted")

        beneficiary = self.get_beneficiary(event_id, beneficiary_id)
        if beneficiary is None:
            return self._fail(NOT_FOUND, f"Beneficiary {beneficiary_id} not found")

        if beneficiary.current_step != step:
            return self._fail(
                CONFLICT,
                f"Beneficiary {beneficiary.reg_number} is at {beneficiary.current_step}, not {step}",
            )

        previous = stages.predecessor(step)
        cleared = {step, previous}
        updates = {
            field: None
            for cleared_step in cleared
            for field in stages.STEP_FIELDS.get(cleared_step, [])
        }
        updates["current_step"] = previous
        updates["completed_steps"] = [
            s for s in (beneficiary.completed_steps or []) if s not in cleared
        ]
        updates["step_volunteers"] = {
            s: name for s, name in (beneficiary.step_volunteers or {}).items() if s not in cleared
        }

        result = self._write(beneficiary, step, updates)
        if result["success"]:
            result["message"] = f"{beneficiary.reg_number} moved back to {stages.step_label(previous)}"
            logger.info(f"Reverted {beneficiary.reg_number} from {step} to {previous}")
        return result

    def cancel(self, event_id, beneficiary_id) -> dict:
        """Move a beneficiary to the terminal ``cancelled`` state."""
        beneficiary = self.get_beneficiary(event_id, beneficiary_id)
        if beneficiary is None:
            return self._fail(NOT_FOUND, f"Beneficiary {beneficiary_id} not found")

        current = beneficiary.current_step
        if not stages.is_known_step(current):
            return self._fail(CONFLICT, f"Beneficiary {beneficiary.reg_number} has unknown step {current}")
        if stages.is_terminal(current):
            return self._fail(
                CONFLICT, f"Beneficiary {beneficiary.reg_number} is already {current}"
            )

        result = self._write(beneficiary, current, {"current_step": stages.CANCELLED})
        if result["success"]:
            result["message"] = f"{beneficiary.reg_number} cancelled"
            logger.info(f"Cancelled {beneficiary.reg_number} at {current}")
        return result

    def _apply_advance(self, beneficiary, step, fields, volunteer):
        next_step = stages.successor(step)
        updates = dict(fields)
        updates["current_step"] = next_step
        completed = list(beneficiary.completed_steps or [])
        if step not in completed:
            completed.append(step)
        updates["completed_steps"] = completed
        volunteers = dict(beneficiary.step_volunteers or {})
        if volunteer and volunteer.strip():
            volunteers[step] = volunteer.strip()
        updates["step_volunteers"] = volunteers

        result = self._write(beneficiary, step, updates)
        if result["success"]:
            result["message"] = (
                f"{beneficiary.reg_number} moved to {stages.step_label(next_step)}"
            )
            logger.info(f"Advanced {beneficiary.reg_number} from {step} to {next_step}")
        return result

    def _write(self, beneficiary, expected_step, updates):
        """Issue the single conditional update for a transition."""
        updates["updated_at"] = timezone.now()
        try:
            rows = Beneficiary.objects.filter(
                pk=beneficiary.pk, current_step=expected_step
            ).update(**updates)
        except DatabaseError as e:
            logger.error(f"Error updating beneficiary {beneficiary.reg_number}: {str(e)}")
            return self._fail(STORE_ERROR, f"Error saving beneficiary: {str(e)}")

        if rows == 0:
            logger.warning(
                f"Beneficiary {beneficiary.reg_number} left {expected_step} before the update"
            )
            return self._fail(
                CONFLICT,
                f"Beneficiary {beneficiary.reg_number} was updated by someone else, reload and retry",
            )

        beneficiary.refresh_from_db()
        return {"success": True, "changed": True, "beneficiary": beneficiary}

    def _check_current_step(self, beneficiary, step):
        """Return a result when the beneficiary is not at ``step``, else None."""
        current = beneficiary.current_step
        if current == step:
            return None

        if not stages.is_known_step(current):
            logger.error(f"Beneficiary {beneficiary.reg_number} has unknown step {current!r}")
            return self._fail(
                CONFLICT, f"Beneficiary {beneficiary.reg_number} has unknown step {current}"
            )

        if stages.is_past(current, step):
            # Re-sent transition for a stage that already went through
            return {
                "success": True,
                "changed": False,
                "beneficiary": beneficiary,
                "message": f"{beneficiary.reg_number} already completed {stages.step_label(step)}",
            }

        return self._fail(
            CONFLICT,
            f"Beneficiary {beneficiary.reg_number} is at {current}, not {step}",
        )

    def _volunteer_errors(self, step, volunteer):
        if step in stages.VOLUNTEER_REQUIRED_STEPS and not (volunteer or "").strip():
            return {"volunteer": ["Please enter your volunteer name"]}
        return {}

    def get_beneficiary(self, event_id, beneficiary_id):
        return Beneficiary.objects.filter(event_id=event_id, pk=beneficiary_id).first()

    def _fail(self, code, message):
        return {"success": False, "code": code, "message": message}
