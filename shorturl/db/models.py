"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- UrlEntry: Stores the mapping between numeric codes and original URLs
- Counter: Holds the next value of a named code sequence

Design Decisions:
- The code is the primary key of url_entries (the store's only index)
- Codes are assigned by the counter, never by the database autoincrement
- visit_count is kept for schema compatibility but is never incremented
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UrlEntry(SQLModel, table=True):
    """
    Main table storing code to URL mappings.

    Fields:
    - code: Short numeric identifier issued by the counter
    - original_url: The long URL that was shortened
    - visit_count: Dormant visit counter (always 0)
    - created_at: Timestamp when the entry was registered

    Rows are written once and never updated or deleted.
    """
    __tablename__ = "url_entries"

    code: int = Field(
        sa_column=Column(Integer, primary_key=True, autoincrement=False)
    )
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    visit_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class Counter(SQLModel, table=True):
    """
    Named monotonically increasing sequence.

    Fields:
    - name: Sequence name (primary key)
    - next_value: The value the next allocation will return

    Invariant: every value already handed out is strictly less than next_value.
    """
    __tablename__ = "counters"

    name: str = Field(sa_column=Column(String(64), primary_key=True))
    next_value: int = Field(sa_column=Column(Integer, nullable=False))
