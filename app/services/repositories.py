"""
Repository layer over Cloud Firestore.

Every repository receives the async Firestore client it talks to; nothing in
this module reaches for a global client.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from app.core.errors import (
    CapacityConflictError,
    ConflictError,
    NotFoundError,
    StoreError,
    TicketCodeCollisionError,
)
from app.models import Event, Profile, Ticket, TicketCategory, TicketStatus
from app.schemas.event import EventQuery
from app.schemas.ticket import TicketQuery
from app.schemas.user import ProfileQuery

logger = logging.getLogger(__name__)

DOCUMENT_ID = FieldPath.document_id()
# Firestore caps a single batched write or transaction
BATCH_SIZE = 500
# Each generated ticket costs two writes (ticket and code index), plus the counter
MAX_GENERATED_PER_WRITE = (BATCH_SIZE - 1) // 2

Predicate = Callable[[Dict[str, Any]], bool]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def store_errors(action: str):
    """Translate google-api-core failures into application errors"""
    try:
        yield
    except google_exceptions.NotFound as e:
        raise NotFoundError(f"Failed to {action}: not found") from e
    except google_exceptions.GoogleAPICallError as e:
        logger.error("Firestore call failed while trying to %s: %s", action, e)
        raise StoreError(f"Failed to {action}: {e.message}") from e


def contains(value: Optional[str], needle: str) -> bool:
    """Case-insensitive substring match (Firestore has no ILIKE)"""
    return needle.lower() in (value or "").lower()


async def _stream(query) -> list:
    return [snap async for snap in query.stream()]


async def _window(query, offset: int, limit: int, predicate: Optional[Predicate] = None) -> list:
    if predicate is None:
        return await _stream(query.offset(offset).limit(limit))
    matches = [snap for snap in await _stream(query) if predicate(snap.to_dict())]
    return matches[offset:offset + limit]


async def _tally(query, predicate: Optional[Predicate] = None) -> int:
    if predicate is None:
        results = await query.count(alias="total").get()
        return int(results[0][0].value) if results else 0
    return sum(1 for snap in await _stream(query) if predicate(snap.to_dict()))


# -------- Event repository --------

class EventRepo:
    COLLECTION = "events"

    def __init__(self, client):
        self.client = client

    @property
    def collection(self):
        return self.client.collection(self.COLLECTION)

    def _filtered(self, query: EventQuery):
        q = self.collection
        if query.admin_id:
            q = q.where(filter=FieldFilter("admin_id", "==", query.admin_id))
        if query.start_date:
            q = q.where(filter=FieldFilter("event_date", ">=", query.start_date))
        if query.end_date:
            q = q.where(filter=FieldFilter("event_date", "<=", query.end_date))
        return q.order_by("event_date").order_by(DOCUMENT_ID)

    @staticmethod
    def _predicate(query: EventQuery) -> Optional[Predicate]:
        if not query.location:
            return None
        return lambda data: contains(data.get("location"), query.location)

    async def create(self, data: Dict[str, Any]) -> Event:
        now = utcnow()
        payload = {**data, "created_at": now, "updated_at": now}
        ref = self.collection.document()
        with store_errors("create event"):
            await ref.set(payload)
        return Event.from_dict(ref.id, payload)

    async def get_by_id(self, event_id: str) -> Optional[Event]:
        with store_errors("fetch event"):
            snap = await self.collection.document(event_id).get()
        return Event.from_dict(snap.id, snap.to_dict()) if snap.exists else None

    async def find(self, query: EventQuery) -> List[Event]:
        with store_errors("fetch events"):
            snaps = await _window(self._filtered(query), query.offset, query.limit, self._predicate(query))
        return [Event.from_dict(s.id, s.to_dict()) for s in snaps]

    async def count(self, query: EventQuery) -> int:
        with store_errors("count events"):
            return await _tally(self._filtered(query), self._predicate(query))

    async def list_by_admin(self, admin_id: str) -> List[Event]:
        q = self.collection.where(filter=FieldFilter("admin_id", "==", admin_id)).order_by("event_date")
        with store_errors("fetch admin events"):
            snaps = await _stream(q)
        return [Event.from_dict(s.id, s.to_dict()) for s in snaps]

    async def update(self, event_id: str, data: Dict[str, Any]) -> Event:
        ref = self.collection.document(event_id)
        with store_errors("update event"):
            await ref.update({**data, "updated_at": utcnow()})
            snap = await ref.get()
        return Event.from_dict(snap.id, snap.to_dict())

    async def delete(self, event_id: str) -> None:
        with store_errors("delete event"):
            await self.collection.document(event_id).delete()


# -------- Ticket category repository --------

class TicketCategoryRepo:
    COLLECTION = "ticket_categories"

    def __init__(self, client):
        self.client = client

    @property
    def collection(self):
        return self.client.collection(self.COLLECTION)

    async def create(self, data: Dict[str, Any]) -> TicketCategory:
        now = utcnow()
        payload = {**data, "available": 0, "issued_count": 0, "created_at": now, "updated_at": now}
        ref = self.collection.document()
        with store_errors("create ticket category"):
            await ref.set(payload)
        return TicketCategory.from_dict(ref.id, payload)

    async def get_by_id(self, category_id: str) -> Optional[TicketCategory]:
        with store_errors("fetch ticket category"):
            snap = await self.collection.document(category_id).get()
        return TicketCategory.from_dict(snap.id, snap.to_dict()) if snap.exists else None

    async def list_by_event(self, event_id: str) -> List[TicketCategory]:
        q = self.collection.where(filter=FieldFilter("event_id", "==", event_id)).order_by("created_at")
        with store_errors("fetch ticket categories"):
            snaps = await _stream(q)
        return [TicketCategory.from_dict(s.id, s.to_dict()) for s in snaps]

    async def update(self, category_id: str, data: Dict[str, Any]) -> TicketCategory:
        ref = self.collection.document(category_id)
        with store_errors("update ticket category"):
            await ref.update({**data, "updated_at": utcnow()})
            snap = await ref.get()
        return TicketCategory.from_dict(snap.id, snap.to_dict())

    async def set_available(self, category_id: str, available: int) -> None:
        with store_errors("update category available count"):
            await self.collection.document(category_id).update({"available": available})

    async def delete(self, category_id: str) -> None:
        with store_errors("delete ticket category"):
            await self.collection.document(category_id).delete()


# -------- Ticket repository --------

class TicketRepo:
    COLLECTION = "tickets"
    # Uniqueness index: one document per ticket code
    CODES_COLLECTION = "ticket_codes"

    def __init__(self, client):
        self.client = client

    @property
    def collection(self):
        return self.client.collection(self.COLLECTION)

    @property
    def codes(self):
        return self.client.collection(self.CODES_COLLECTION)

    def _filtered(self, query: TicketQuery):
        q = self.collection
        if query.user_id:
            q = q.where(filter=FieldFilter("user_id", "==", query.user_id))
        if query.ticket_category_id:
            q = q.where(filter=FieldFilter("ticket_category_id", "==", query.ticket_category_id))
        if query.status:
            q = q.where(filter=FieldFilter("status", "==", query.status.value))
        return q.order_by("created_at").order_by(DOCUMENT_ID)

    def _by_category(self, category_id: str, status: Optional[TicketStatus] = None):
        q = self.collection.where(filter=FieldFilter("ticket_category_id", "==", category_id))
        if status:
            q = q.where(filter=FieldFilter("status", "==", status.value))
        return q

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        with store_errors("fetch ticket"):
            snap = await self.collection.document(ticket_id).get()
        return Ticket.from_dict(snap.id, snap.to_dict()) if snap.exists else None

    async def find(self, query: TicketQuery) -> List[Ticket]:
        with store_errors("fetch tickets"):
            snaps = await _window(self._filtered(query), query.offset, query.limit)
        return [Ticket.from_dict(s.id, s.to_dict()) for s in snaps]

    async def count(self, query: TicketQuery) -> int:
        with store_errors("count tickets"):
            return await _tally(self._filtered(query))

    async def list_by_category(self, category_id: str) -> List[Ticket]:
        q = self._by_category(category_id).order_by("created_at").order_by(DOCUMENT_ID)
        with store_errors("fetch tickets"):
            snaps = await _stream(q)
        return [Ticket.from_dict(s.id, s.to_dict()) for s in snaps]

    async def count_by_category(self, category_id: str, status: Optional[TicketStatus] = None) -> int:
        with store_errors("count tickets"):
            return await _tally(self._by_category(category_id, status))

    async def has_assigned(self, category_id: str) -> bool:
        q = self._by_category(category_id).where(filter=FieldFilter("user_id", "!=", None)).limit(1)
        with store_errors("check assigned tickets"):
            return bool(await _stream(q))

    async def insert_generated(
        self,
        category_id: str,
        codes: Sequence[str],
        expected_count: int,
    ) -> List[Ticket]:
        """Insert new available tickets if the category still has ``expected_count`` issued.

        Runs as one transaction that reads the category's ``issued_count`` and
        ``stock``, creates the ticket and code-index documents, and bumps the
        counter. Raises CapacityConflictError if the counter moved or the batch
        would exceed the stock stored on the category, TicketCodeCollisionError
        if a code is taken. At most MAX_GENERATED_PER_WRITE codes fit in one
        call.
        """
        if len(codes) > MAX_GENERATED_PER_WRITE:
            raise ValueError(
                f"Cannot generate {len(codes)} tickets in one write, the limit is {MAX_GENERATED_PER_WRITE}"
            )
        category_ref = self.client.collection(TicketCategoryRepo.COLLECTION).document(category_id)
        now = utcnow()

        @firestore.async_transactional
        async def write(transaction) -> List[Ticket]:
            snap = await category_ref.get(transaction=transaction)
            if not snap.exists:
                raise NotFoundError(f"Ticket category with ID {category_id} not found")
            data = snap.to_dict()
            issued = int(data.get("issued_count", 0))
            stock = int(data.get("stock", 0))
            if issued != expected_count or issued + len(codes) > stock:
                raise CapacityConflictError(
                    f"Ticket count for category {category_id} changed during generation"
                )

            created: List[Ticket] = []
            for code in codes:
                ref = self.collection.document()
                ticket = Ticket(
                    id=ref.id,
                    ticket_category_id=category_id,
                    ticket_code=code,
                    created_at=now,
                    updated_at=now,
                )
                transaction.create(self.codes.document(code), {"ticket_id": ref.id, "ticket_category_id": category_id})
                transaction.create(ref, ticket.to_dict())
                created.append(ticket)

            transaction.update(category_ref, {"issued_count": issued + len(codes), "updated_at": now})
            return created

        with store_errors("generate tickets"):
            try:
                return await write(self.client.transaction())
            except google_exceptions.AlreadyExists as e:
                raise TicketCodeCollisionError("Generated ticket code already exists") from e

    async def update(self, ticket_id: str, data: Dict[str, Any]) -> Ticket:
        ref = self.collection.document(ticket_id)
        with store_errors("update ticket"):
            await ref.update({**data, "updated_at": utcnow()})
            snap = await ref.get()
        return Ticket.from_dict(snap.id, snap.to_dict())

    async def claim(self, ticket_id: str, user_id: str, data: Dict[str, Any]) -> Ticket:
        """Assign an unassigned ticket to ``user_id`` and apply ``data``.

        The holder is checked inside a transaction, so of two concurrent
        claims only one lands; the other raises ConflictError.
        """
        ref = self.collection.document(ticket_id)

        @firestore.async_transactional
        async def write(transaction) -> Ticket:
            snap = await ref.get(transaction=transaction)
            if not snap.exists:
                raise NotFoundError(f"Ticket with ID {ticket_id} not found")
            current = snap.to_dict()
            holder = current.get("user_id")
            if holder is not None and holder != user_id:
                raise ConflictError("Ticket has already been claimed by another user")
            payload = {**data, "user_id": user_id, "updated_at": utcnow()}
            transaction.update(ref, payload)
            return Ticket.from_dict(snap.id, {**current, **payload})

        with store_errors("claim ticket"):
            return await write(self.client.transaction())

    async def delete_by_category(self, category_id: str) -> int:
        """Delete every ticket of a category together with its code index entry"""
        with store_errors("delete tickets"):
            snaps = await _stream(self._by_category(category_id))
            for start in range(0, len(snaps), BATCH_SIZE // 2):
                batch = self.client.batch()
                for snap in snaps[start:start + BATCH_SIZE // 2]:
                    batch.delete(snap.reference)
                    batch.delete(self.codes.document(snap.get("ticket_code")))
                await batch.commit()
        return len(snaps)


# -------- Profile repository --------

class ProfileRepo:
    COLLECTION = "profiles"

    def __init__(self, client):
        self.client = client

    @property
    def collection(self):
        return self.client.collection(self.COLLECTION)

    def _filtered(self, query: ProfileQuery):
        q = self.collection
        if query.role:
            q = q.where(filter=FieldFilter("role", "==", query.role.value))
        return q.order_by("created_at", direction=firestore.Query.DESCENDING).order_by(
            DOCUMENT_ID, direction=firestore.Query.DESCENDING
        )

    @staticmethod
    def _predicate(query: ProfileQuery) -> Optional[Predicate]:
        if not query.search:
            return None
        return lambda data: contains(data.get("name"), query.search)

    async def create(self, profile_id: str, data: Dict[str, Any]) -> Profile:
        now = utcnow()
        payload = {**data, "created_at": now, "updated_at": now}
        with store_errors("create profile"):
            await self.collection.document(profile_id).set(payload)
        return Profile.from_dict(profile_id, payload)

    async def get_by_id(self, profile_id: str) -> Optional[Profile]:
        with store_errors("get profile"):
            snap = await self.collection.document(profile_id).get()
        return Profile.from_dict(snap.id, snap.to_dict()) if snap.exists else None

    async def find(self, query: ProfileQuery) -> List[Profile]:
        with store_errors("get profiles"):
            snaps = await _window(self._filtered(query), query.offset, query.limit, self._predicate(query))
        return [Profile.from_dict(s.id, s.to_dict()) for s in snaps]

    async def count(self, query: ProfileQuery) -> int:
        with store_errors("count profiles"):
            return await _tally(self._filtered(query), self._predicate(query))

    async def update(self, profile_id: str, data: Dict[str, Any]) -> Profile:
        ref = self.collection.document(profile_id)
        with store_errors("update profile"):
            await ref.update({**data, "updated_at": utcnow()})
            snap = await ref.get()
        return Profile.from_dict(snap.id, snap.to_dict())
