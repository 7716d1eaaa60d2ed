from __future__ import annotations

import datetime as dt
from typing import Callable

from sqlalchemy.orm import Session

from marketwatch.db import init_db, new_session


SessionFactory = Callable[[], Session]


def resolve_session_factory(session_factory: SessionFactory | None) -> SessionFactory:
    if session_factory is not None:
        return session_factory
    # default: process-wide engine, ensure tables exist
    init_db()
    return new_session


def as_utc(value: dt.datetime) -> dt.datetime:
    # sqlite hands back naive datetimes even for DateTime(timezone=True)
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)
