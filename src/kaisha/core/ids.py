"""Canonical ID, timestamp and calendar factories.

All modules import from here instead of defining local _uuid()/_now() copies.

ID Categories
-------------
1. Aggregate IDs: UUID v4 strings wrapped in a ``NewType`` per aggregate
   (``CompanyId``, ``BoardId``, ``DirectorId``, ``ShareholderId``).
   Generated once at creation, never reused or mutated.
2. Event IDs: UUID v4 strings (``event_id``), the idempotency key for
   downstream consumers.

Timestamp Rule
--------------
Event timestamps are ``datetime`` with ``tzinfo=timezone.utc``, never naive.
Legal dates (appointments, registrations, effective dates) are plain
``datetime.date`` values.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import NewType

CompanyId = NewType("CompanyId", str)
BoardId = NewType("BoardId", str)
DirectorId = NewType("DirectorId", str)
ShareholderId = NewType("ShareholderId", str)


def new_id() -> str:
    """Generate a new UUID v4 string.  Use for all internal entity IDs."""
    return str(uuid.uuid4())


def new_company_id() -> CompanyId:
    return CompanyId(new_id())


def new_board_id() -> BoardId:
    return BoardId(new_id())


def new_director_id() -> DirectorId:
    return DirectorId(new_id())


def new_shareholder_id() -> ShareholderId:
    return ShareholderId(new_id())


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def today() -> date:
    """Return today's calendar date.

    Only used as a default where a command omits its effective date.
    """
    return date.today()
