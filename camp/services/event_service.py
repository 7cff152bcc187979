import logging

from django.db import DatabaseError

from camp.models import Event

logger = logging.getLogger(__name__)


class EventService:
    """Service class for camp events, the scope every stage call runs in."""

    def list_events(self):
        return list(Event.objects.all())

    def get_event(self, event_id):
        return Event.objects.filter(id=event_id).first()

    def create_event(self, event_data: dict) -> dict:
        """
        Create a camp event.

        Args:
            event_data: Validated event fields (event_name, event_date, location)

        Returns:
            dict: Contains 'success' boolean and 'event' or 'message'
        """
        try:
            event = Event.objects.create(**event_data)
        except DatabaseError as e:
            logger.error(f"Error creating event {event_data.get('event_name')}: {str(e)}")
            return {"success": False, "code": "store_error", "message": f"Error creating event: {str(e)}"}

        logger.info(f"Created event {event.event_name} on {event.event_date}")
        return {"success": True, "event": event, "message": "Event created successfully"}

    def update_event(self, event_id, event_data: dict) -> dict:
        event = self.get_event(event_id)
        if not event:
            return {"success": False, "code": "not_found", "message": f"Event {event_id} not found"}

        for field, value in event_data.items():
            setattr(event, field, value)
        try:
            event.save()
        except DatabaseError as e:
            logger.error(f"Error updating event {event_id}: {str(e)}")
            return {"success": False, "code": "store_error", "message": f"Error updating event: {str(e)}"}

        logger.info(f"Updated event {event.event_name}")
        return {"success": True, "event": event, "message": "Event updated successfully"}

    def delete_event(self, event_id) -> dict:
        """Delete an event together with its beneficiaries."""
        event = self.get_event(event_id)
        if not event:
            return {"success": False, "code": "not_found", "message": f"Event {event_id} not found"}

        try:
            deleted, _ = event.delete()
        except DatabaseError as e:
            logger.error(f"Error deleting event {event_id}: {str(e)}")
            return {"success": False, "code": "store_error", "message": f"Error deleting event: {str(e)}"}

        logger.info(f"Deleted event {event_id} ({deleted} rows)")
        return {"success": True, "message": "Event deleted successfully"}
