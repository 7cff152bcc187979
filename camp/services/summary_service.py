import logging
from collections import Counter

from camp import stages
from camp.models import Beneficiary, Event

logger = logging.getLogger(__name__)


class SummaryService:
    """Aggregates the progress of one camp event."""

    def get_summary(self, event_id) -> dict:
        """
        Build the camp summary for an event.

        Returns:
            dict: Contains 'success' boolean and 'data' or 'message'
        """
        event = Event.objects.filter(id=event_id).first()
        if not event:
            return {"success": False, "code": "not_found", "message": f"Event {event_id} not found"}

        aid_types = Counter()
        extra_items = Counter()
        step_counts = Counter()
        current_steps = Counter()
        total = 0

        for beneficiary in Beneficiary.objects.filter(event=event).only(
            "type_of_aid", "extra_items", "completed_steps", "current_step"
        ):
            total += 1
            for flag, value in (beneficiary.type_of_aid or {}).items():
                if value is True:
                    aid_types[flag] += 1
            for entry in beneficiary.extra_items or []:
                extra_items[entry["item"]] += int(entry.get("quantity") or 0)
            for step in beneficiary.completed_steps or []:
                step_counts[step] += 1
            current_steps[beneficiary.current_step] += 1

        completed = current_steps[stages.COMPLETED]
        completion_rate = round(completed / total * 100) if total else 0

        logger.info(f"Summary for {event.event_name}: {completed}/{total} completed")
        return {
            "success": True,
            "data": {
                "event_id": str(event.id),
                "event_name": event.event_name,
                "total_beneficiaries": total,
                "completed_beneficiaries": completed,
                "completion_rate": completion_rate,
                "aid_types": dict(aid_types),
                "extra_items": dict(extra_items),
                "step_counts": {step: step_counts[step] for step in stages.STEP_ORDER[:-1]},
                "current_steps": dict(current_steps),
            },
        }
