"""
Ticket category and ticket routes
"""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_current_user, get_ticket_service, require_admin
from app.core.config import settings
from app.schemas.ticket import TicketCategoryUpdate, TicketQuery, TicketUpdate
from app.services.ticket_service import TicketService
from app.utils.responses import offset_pagination, success_response
from app.utils.security import CurrentUser

categories_router = APIRouter()
tickets_router = APIRouter()

# -------- ticket categories --------

@categories_router.get("/{category_id}")
async def get_ticket_category(
    category_id: str,
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Get a ticket category"""
    category = await ticket_service.get_ticket_category_by_id(category_id)
    return success_response(message="Ticket category retrieved successfully", data=category)

@categories_router.put("/{category_id}")
async def update_ticket_category(
    category_id: str,
    data: TicketCategoryUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Update name, price or stock of a category (event owner only)"""
    category = await ticket_service.update_ticket_category(category_id, data, current_user.id)
    return success_response(message="Ticket category updated successfully", data=category)

@categories_router.delete("/{category_id}")
async def delete_ticket_category(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Delete a category and its tickets (event owner only)"""
    await ticket_service.delete_ticket_category(category_id, current_user.id)
    return success_response(message="Ticket category deleted successfully")

@categories_router.post("/{category_id}/generate")
async def generate_tickets(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Generate tickets up to the category's stock (event owner only)"""
    result = await ticket_service.generate_tickets(category_id, current_user.id)
    return success_response(
        message=f"Successfully generated {result.generated_count} tickets.",
        data=result.model_dump(),
        status_code=201
    )

@categories_router.get("/{category_id}/tickets")
async def list_category_tickets(
    category_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """List the tickets of a category"""
    tickets = await ticket_service.get_tickets_by_category_id(category_id)
    return success_response(message="Tickets retrieved successfully", data=tickets)

# -------- tickets --------

@tickets_router.get("/my-tickets")
async def list_my_tickets(
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """List tickets assigned to the caller"""
    query = TicketQuery(user_id=current_user.id, limit=limit, offset=offset)
    tickets, total = await ticket_service.get_tickets(query)
    return success_response(
        message="User tickets retrieved successfully",
        data=tickets,
        pagination=offset_pagination(total, limit, offset)
    )

@tickets_router.get("/users/{user_id}")
async def list_user_tickets(
    user_id: str,
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    current_user: CurrentUser = Depends(require_admin),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """List tickets assigned to a user (admin only)"""
    query = TicketQuery(user_id=user_id, limit=limit, offset=offset)
    tickets, total = await ticket_service.get_tickets(query)
    return success_response(
        message="Tickets retrieved successfully",
        data=tickets,
        pagination=offset_pagination(total, limit, offset)
    )

@tickets_router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Get a ticket"""
    ticket = await ticket_service.get_ticket_by_id(ticket_id)
    return success_response(message="Ticket retrieved successfully", data=ticket)

@tickets_router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    data: TicketUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service)
):
    """Update a ticket's status; claims it if unassigned"""
    ticket = await ticket_service.update_ticket(ticket_id, data, current_user.id)
    return success_response(message="Ticket updated successfully", data=ticket)
