"""
Domain models package
"""

from .event import Event
from .ticket import Ticket, TicketCategory, TicketStatus
from .profile import Profile, Role

__all__ = ["Event", "Ticket", "TicketCategory", "TicketStatus", "Profile", "Role"]
