"""
Ticket categories, ticket generation and ticket updates
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from app.core.config import settings
from app.core.errors import BadRequestError, ConflictError, NotFoundError, RetryableConflictError
from app.models import Event, Ticket, TicketCategory, TicketStatus
from app.schemas.ticket import (
    GenerationResult,
    TicketCategoryCreate,
    TicketCategoryUpdate,
    TicketQuery,
    TicketUpdate,
)
from app.services.authorization import Authorizer, is_event_owner
from app.utils.codes import generate_ticket_codes

logger = logging.getLogger(__name__)


class KeyedLock:
    """One asyncio.Lock per key, dropped once nobody holds or waits for it"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._locks

    @asynccontextmanager
    async def hold(self, key: str):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]


# Shared by every TicketService in the process
generation_locks = KeyedLock()


class TicketService:
    """Service for ticket categories and tickets"""

    def __init__(self, events, categories, tickets, locks: Optional[KeyedLock] = None,
                 max_attempts: Optional[int] = None, chunk_size: Optional[int] = None):
        self.events = events
        self.categories = categories
        self.tickets = tickets
        self.authorizer = Authorizer(events, categories)
        self.locks = locks if locks is not None else generation_locks
        self.max_attempts = max_attempts or settings.TICKET_GENERATION_MAX_ATTEMPTS
        self.chunk_size = chunk_size or settings.TICKET_GENERATION_CHUNK_SIZE

    # -------- generation --------

    async def generate_tickets(self, category_id: str, caller_id: str) -> GenerationResult:
        """Fill the category up to its stock with new available tickets.

        Runs are serialized per category inside the process. The category is
        read again once the lock is held, and tickets are written in chunks of
        at most ``chunk_size``. Each chunk only lands if the category's issued
        count still matches the count read before it and fits the stored
        stock. A lost race or a code collision is retried with a fresh read,
        up to ``max_attempts`` failures per run.
        """
        await self.authorizer.require_category_owner(
            category_id, caller_id, "generate tickets for this category"
        )

        generated = 0
        failures = 0
        async with self.locks.hold(category_id):
            while True:
                category = await self.get_ticket_category_by_id(category_id)
                existing = await self.tickets.count_by_category(category_id)
                to_generate = min(category.stock - existing, self.chunk_size)
                if to_generate <= 0:
                    break

                codes = generate_ticket_codes(to_generate)
                try:
                    created = await self.tickets.insert_generated(
                        category_id, codes, expected_count=existing
                    )
                except RetryableConflictError as e:
                    failures += 1
                    logger.warning(
                        "Ticket generation for category %s lost a race (attempt %d/%d): %s",
                        category_id, failures, self.max_attempts, e.message,
                    )
                    if failures >= self.max_attempts:
                        if generated:
                            await self.refresh_available(category_id)
                        raise ConflictError(
                            "Tickets could not be generated because of concurrent updates, please retry"
                        )
                    continue
                generated += len(created)

            if generated:
                await self.refresh_available(category_id)
                logger.info("Generated %d tickets for category %s", generated, category_id)
        return GenerationResult(generated_count=generated, total_count=existing)

    async def refresh_available(self, category_id: str) -> int:
        """Recount available tickets and store the figure on the category"""
        available = await self.tickets.count_by_category(category_id, status=TicketStatus.AVAILABLE)
        await self.categories.set_available(category_id, available)
        return available

    # -------- tickets --------

    async def get_ticket_by_id(self, ticket_id: str) -> Ticket:
        ticket = await self.tickets.get_by_id(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket with ID {ticket_id} not found")
        return ticket

    async def get_tickets(self, query: TicketQuery) -> Tuple[List[Ticket], int]:
        tickets = await self.tickets.find(query)
        total = await self.tickets.count(query)
        return tickets, total

    async def get_tickets_by_category_id(self, category_id: str) -> List[Ticket]:
        await self.get_ticket_category_by_id(category_id)
        return await self.tickets.list_by_category(category_id)

    async def update_ticket(self, ticket_id: str, update: TicketUpdate, caller_id: str) -> Ticket:
        """Change a ticket's status; an unassigned ticket is claimed by the caller"""
        ticket = await self.get_ticket_by_id(ticket_id)
        event = await self.authorizer.require_ticket_access(ticket, caller_id)

        changes = update.model_dump(mode="json", exclude_none=True)
        if ticket.user_id is None and not is_event_owner(event, caller_id):
            # Conditional on the ticket still being unassigned at write time
            updated = await self.tickets.claim(ticket_id, caller_id, changes)
            logger.info("Ticket %s claimed by user %s", ticket_id, caller_id)
        else:
            if not changes:
                raise BadRequestError("No ticket fields to update")
            updated = await self.tickets.update(ticket_id, changes)
        if updated.status != ticket.status:
            await self.refresh_available(ticket.ticket_category_id)
        return updated

    # -------- categories --------

    async def get_ticket_category_by_id(self, category_id: str) -> TicketCategory:
        category = await self.categories.get_by_id(category_id)
        if not category:
            raise NotFoundError(f"Ticket category with ID {category_id} not found")
        return category

    async def get_ticket_categories_by_event_id(self, event_id: str) -> List[TicketCategory]:
        await self.authorizer.event_of(event_id)
        return await self.categories.list_by_event(event_id)

    async def create_ticket_category(
        self, event_id: str, data: TicketCategoryCreate, caller_id: str
    ) -> TicketCategory:
        await self.authorizer.require_event_owner(
            event_id, caller_id, "create ticket categories for this event"
        )
        category = await self.categories.create({**data.model_dump(), "event_id": event_id})
        logger.info("Ticket category %s created for event %s", category.id, event_id)
        return category

    async def update_ticket_category(
        self, category_id: str, update: TicketCategoryUpdate, caller_id: str
    ) -> TicketCategory:
        category, _ = await self.authorizer.require_category_owner(
            category_id, caller_id, "update this ticket category"
        )
        changes = update.model_dump(exclude_none=True)
        if not changes:
            raise BadRequestError("No ticket category fields to update")

        if "stock" in changes:
            async with self.locks.hold(category_id):
                issued = await self.tickets.count_by_category(category_id)
                if changes["stock"] < issued:
                    raise ConflictError(
                        f"Stock cannot be lower than the {issued} tickets already generated"
                    )
                return await self.categories.update(category_id, changes)

        return await self.categories.update(category.id, changes)

    async def delete_ticket_category(self, category_id: str, caller_id: str) -> None:
        category, _ = await self.authorizer.require_category_owner(
            category_id, caller_id, "delete this ticket category"
        )
        await self.purge_categories([category])

    async def purge_categories(self, categories: List[TicketCategory]) -> None:
        """Delete categories with their tickets, refusing if any ticket was claimed"""
        for category in categories:
            if await self.tickets.has_assigned(category.id):
                raise ConflictError(
                    f"Ticket category {category.name!r} has tickets assigned to users and cannot be deleted"
                )
        for category in categories:
            async with self.locks.hold(category.id):
                removed = await self.tickets.delete_by_category(category.id)
                await self.categories.delete(category.id)
            logger.info("Ticket category %s deleted with %d tickets", category.id, removed)

    async def purge_event_categories(self, event: Event) -> None:
        await self.purge_categories(await self.categories.list_by_event(event.id))
