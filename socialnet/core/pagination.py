import uuid
from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession



class CursorPagination(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1)
    before: Optional[uuid.UUID] = None
    after: Optional[uuid.UUID] = None


class OffsetPagination(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1)
    skip: Optional[int] = Field(default=None, ge=0)


def _ordering(model, newest_first: bool, reverse: bool = False):
    # id ascending breaks ties between equal timestamps
    date_desc = newest_first != reverse
    id_asc = not reverse
    return (
        model.created_at.desc() if date_desc else model.created_at.asc(),
        model.id.asc() if id_asc else model.id.desc(),
    )


def _past(model, cursor, newest_first: bool):
    """Rows strictly after ``cursor`` in collection order."""
    older_or_newer = model.created_at < cursor.created_at if newest_first else model.created_at > cursor.created_at
    return or_(older_or_newer, and_(model.created_at == cursor.created_at, model.id > cursor.id))


def _ahead(model, cursor, newest_first: bool):
    """Rows strictly before ``cursor`` in collection order."""
    newer_or_older = model.created_at > cursor.created_at if newest_first else model.created_at < cursor.created_at
    return or_(newer_or_older, and_(model.created_at == cursor.created_at, model.id < cursor.id))


async def paginate_cursor(
    db: AsyncSession,
    stmt,
    model,
    options: Optional[CursorPagination] = None,
    newest_first: bool = True,
) -> list:
    """Slice ``stmt`` around a record-id cursor.

    The collection is ordered by ``created_at`` (descending when
    ``newest_first``) then ``id`` ascending. ``after`` returns up to ``limit``
    rows following the cursor, ``before`` the last ``limit`` rows preceding
    it; ``after`` takes precedence when both are set. An unknown cursor or an
    exhausted range gives an empty list.
    """
    options = options or CursorPagination()
    cursor_id = options.after or options.before
    backwards = options.after is None and options.before is not None

    if cursor_id is not None:
        cursor = (
            await db.execute(select(model.id, model.created_at).where(model.id == cursor_id))
        ).one_or_none()
        if cursor is None:
            return []
        stmt = stmt.where(_ahead(model, cursor, newest_first) if backwards else _past(model, cursor, newest_first))

    stmt = stmt.order_by(*_ordering(model, newest_first, reverse=backwards))
    if options.limit:
        stmt = stmt.limit(options.limit)

    rows = list((await db.execute(stmt)).scalars().unique().all())
    if backwards:
        rows.reverse()
    return rows


async def paginate_offset(db: AsyncSession, stmt, options: Optional[OffsetPagination] = None) -> list:
    options = options or OffsetPagination()
    if options.skip:
        stmt = stmt.offset(options.skip)
    if options.limit:
        stmt = stmt.limit(options.limit)
    return list((await db.execute(stmt)).scalars().unique().all())


def page_fields(options) -> dict:
    """Pagination inputs as keyword arguments, from a pagination model or raw query values."""
    if options is None:
        return {}
    if isinstance(options, BaseModel):
        return options.model_dump(exclude_none=True)
    return {key: value for key, value in options.items() if value is not None}


# Query-string dependencies; services validate the raw values along with their path ids
def cursor_params(limit: Optional[str] = None, before: Optional[str] = None, after: Optional[str] = None) -> dict:
    return {"limit": limit, "before": before, "after": after}


def offset_params(limit: Optional[str] = None, skip: Optional[str] = None) -> dict:
    return {"limit": limit, "skip": skip}
