"""
Event routes, including the ticket categories nested under an event
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_current_user, get_event_service, get_ticket_service, require_admin
from app.core.config import settings
from app.schemas.event import EventCreate, EventQuery, EventUpdate
from app.schemas.ticket import TicketCategoryCreate
from app.services.event_service import EventService
from app.services.ticket_service import TicketService
from app.utils.responses import offset_pagination, success_response
from app.utils.security import CurrentUser

router = APIRouter()

@router.get("")
async def list_events(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    location: Optional[str] = Query(None),
    admin_id: Optional[str] = Query(None),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    event_service: EventService = Depends(get_event_service)
):
    """List events ordered by date"""
    query = EventQuery(
        start_date=start_date,
        end_date=end_date,
        location=location,
        admin_id=admin_id,
        limit=limit,
        offset=offset
    )
    events, total = await event_service.get_all_events(query)
    return success_response(
        message="Events retrieved successfully",
        data=events,
        pagination=offset_pagination(total, limit, offset)
    )

@router.post("")
async def create_event(
    data: EventCreate,
    current_user: CurrentUser = Depends(require_admin),
    event_service: EventService = Depends(get_event_service)
):
    """Create a new event owned by the calling admin"""
    event = await event_service.create_event(data, current_user.id)
    return success_response(message="Event created successfully", data=event, status_code=201)

@router.get("/user/me")
async def list_my_events(
    current_user: CurrentUser = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    """List events owned by the caller"""
    events = await event_service.get_events_by_admin(current_user.id)
    return success_response(message="User events retrieved successfully", data=events)

@router.get("/{event_id}")
async def get_event(
    event_id: str,
    event_service: EventService = Depends(get_event_service)
):
    """Get a single event"""
    event = await event_service.get_event_by_id(event_id)
    return success_response(message="Event retrieved successfully", data=event)

@router.put("/{event_id}")
async def update_event(
    event_id: str,
    data: EventUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    """Update an event (owner only)"""
    event = await event_service.update_event(event_id, data, current_user.id)
    return success_response(message="Event updated successfully", data=event)

@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    event_service: EventService = Depends(get_event_service)
):
    """Delete an event with its categories and tickets (owner only)"""
    await event_service.delete_event(event_id, current_user.id)
    return success_response(message="Event deleted successfully", data={"deleted_event_id": event_id})

@router.get("/{event_id}/ticket-categories")
async def list_ticket_categories(
    event_id: str,
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """List the ticket categories of an event"""
    categories = await ticket_service.get_ticket_categories_by_event_id(event_id)
    return success_response(message="Ticket categories retrieved successfully", data=categories)

@router.post("/{event_id}/ticket-categories")
async def create_ticket_category(
    event_id: str,
    data: TicketCategoryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Create a ticket category for an event (owner only)"""
    category = await ticket_service.create_ticket_category(event_id, data, current_user.id)
    return success_response(message="Ticket category created successfully", data=category, status_code=201)
