"""
Ownership checks shared by every mutating operation.

An event belongs to the admin who created it; its ticket categories and their
tickets inherit that owner. Missing resources raise NotFound before any
ownership decision is made.
"""

from typing import Optional, Tuple

from app.core.errors import ForbiddenError, NotFoundError
from app.models import Event, Ticket, TicketCategory


def is_event_owner(event: Event, caller_id: str) -> bool:
    return event.admin_id == caller_id


def can_modify_ticket(ticket: Ticket, caller_id: str, event: Optional[Event] = None) -> bool:
    """Owner of the ticket, anyone while it is unassigned, or the owning admin"""
    if ticket.user_id is None or ticket.user_id == caller_id:
        return True
    return event is not None and is_event_owner(event, caller_id)


class Authorizer:
    """Resolves resources and applies the ownership rule"""

    def __init__(self, events, categories):
        self.events = events
        self.categories = categories

    async def event_of(self, event_id: str) -> Event:
        event = await self.events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event with ID {event_id} not found")
        return event

    async def category_of(self, category_id: str) -> Tuple[TicketCategory, Event]:
        category = await self.categories.get_by_id(category_id)
        if not category:
            raise NotFoundError(f"Ticket category with ID {category_id} not found")
        event = await self.events.get_by_id(category.event_id)
        if not event:
            raise NotFoundError("Event not found for the ticket category")
        return category, event

    async def require_event_owner(self, event_id: str, caller_id: str, action: str) -> Event:
        event = await self.event_of(event_id)
        if not is_event_owner(event, caller_id):
            raise ForbiddenError(f"You don't have permission to {action}")
        return event

    async def require_category_owner(
        self, category_id: str, caller_id: str, action: str
    ) -> Tuple[TicketCategory, Event]:
        category, event = await self.category_of(category_id)
        if not is_event_owner(event, caller_id):
            raise ForbiddenError(f"You don't have permission to {action}")
        return category, event

    async def require_ticket_access(self, ticket: Ticket, caller_id: str) -> Event:
        _, event = await self.category_of(ticket.ticket_category_id)
        if not can_modify_ticket(ticket, caller_id, event):
            raise ForbiddenError("You don't have permission to update this ticket")
        return event
