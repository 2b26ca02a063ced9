"""
Event management service
"""

import logging
from typing import List, Tuple

from app.core.errors import BadRequestError
from app.models import Event
from app.schemas.event import EventCreate, EventQuery, EventUpdate
from app.services.authorization import Authorizer
from app.services.ticket_service import TicketService

logger = logging.getLogger(__name__)


class EventService:
    """Service for creating, listing and changing events"""

    def __init__(self, events, ticket_service: TicketService):
        self.events = events
        self.ticket_service = ticket_service
        self.authorizer = Authorizer(events, ticket_service.categories)

    async def create_event(self, data: EventCreate, caller_id: str) -> Event:
        event = await self.events.create({**data.model_dump(), "admin_id": caller_id})
        logger.info("Event %s created by %s", event.id, caller_id)
        return event

    async def get_all_events(self, query: EventQuery) -> Tuple[List[Event], int]:
        if query.start_date and query.end_date and query.start_date > query.end_date:
            raise BadRequestError("start_date must not be after end_date")
        events = await self.events.find(query)
        total = await self.events.count(query)
        return events, total

    async def get_event_by_id(self, event_id: str) -> Event:
        return await self.authorizer.event_of(event_id)

    async def get_events_by_admin(self, admin_id: str) -> List[Event]:
        return await self.events.list_by_admin(admin_id)

    async def update_event(self, event_id: str, update: EventUpdate, caller_id: str) -> Event:
        await self.authorizer.require_event_owner(event_id, caller_id, "update this event")
        changes = update.model_dump(exclude_none=True)
        if not changes:
            raise BadRequestError("No event fields to update")
        return await self.events.update(event_id, changes)

    async def delete_event(self, event_id: str, caller_id: str) -> None:
        """Delete an event together with its ticket categories and tickets"""
        event = await self.authorizer.require_event_owner(event_id, caller_id, "delete this event")
        await self.ticket_service.purge_event_categories(event)
        await self.events.delete(event_id)
        logger.info("Event %s deleted by %s", event_id, caller_id)
