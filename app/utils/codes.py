"""
Ticket code generation
"""

import secrets
from typing import List, Optional

from app.core.config import settings

# Uppercase letters and digits without the look-alikes I, O, 0 and 1
TICKET_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_ticket_code(prefix: Optional[str] = None, length: Optional[int] = None) -> str:
    """Return a code such as ``TIX-7KQ2MZ9WHD``"""
    prefix = settings.TICKET_CODE_PREFIX if prefix is None else prefix
    length = length or settings.TICKET_CODE_LENGTH
    return prefix + "".join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(length))


def generate_ticket_codes(count: int) -> List[str]:
    """Return ``count`` distinct ticket codes"""
    codes: List[str] = []
    seen = set()
    while len(codes) < count:
        code = generate_ticket_code()
        if code not in seen:
            seen.add(code)
            codes.append(code)
    return codes
