import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from socialnet.core.errors import ConflictError
from socialnet.core.visibility import VisibilityResolver


class BaseService:
    def __init__(self, db: AsyncSession, resolver: VisibilityResolver = None):
        self.db = db
        self.resolver = resolver or VisibilityResolver(db)

    async def commit(self, action: str, conflict_code: str = None):
        """Commit the unit of work, rolling back and logging when the database refuses it.

        With ``conflict_code`` a unique/check constraint violation becomes a ConflictError.
        """
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if conflict_code is None:
                logging.error(f"Database error while {action}: {str(e)}")
                raise
            raise ConflictError(conflict_code)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logging.error(f"Database error while {action}: {str(e)}")
            raise
