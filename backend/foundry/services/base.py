"""
Foundry — Generic Repository/Service Base
==========================================

What:  A thin CRUD service over one SQLAlchemy model and one AsyncSession.
How:   Every method is a direct SQLAlchemy 2.0 select/insert/delete. Writes
       call flush() so generated values (ids, timestamps) are available;
       the session owner (get_db_session / session_scope) commits.
Who:   Subclassed by UserService, RoleService and TeamService.

Error translation:
    row missing          → NotFoundError (get, get_one)
    IntegrityError       → ConflictError (create, update)
    other SQLAlchemyError → DatabaseError
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foundry.database import Base
from foundry.exceptions import ConflictError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class ModelService(Generic[ModelT]):
    """
    CRUD operations for a single model class.

    Subclasses set `model` and optionally `resource_name` (used in
    NotFoundError messages):

        class RoleService(ModelService[Role]):
            model = Role
            resource_name = "role"
    """

    model: Type[ModelT]
    resource_name: str = "resource"

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get(self, item_id: UUID) -> ModelT:
        """Fetch by primary key or raise NotFoundError."""
        item = await self.session.get(self.model, item_id)
        if item is None:
            raise NotFoundError(resource=self.resource_name, resource_id=str(item_id))
        return item

    async def get_one_or_none(self, **filters: Any) -> Optional[ModelT]:
        """Fetch the single row matching column=value filters, or None."""
        result = await self.session.execute(select(self.model).filter_by(**filters))
        return result.unique().scalar_one_or_none()

    async def get_one(self, **filters: Any) -> ModelT:
        item = await self.get_one_or_none(**filters)
        if item is None:
            raise NotFoundError(resource=self.resource_name)
        return item

    async def exists(self, **filters: Any) -> bool:
        return await self.count(**filters) > 0

    async def count(self, *criteria: ColumnElement[bool], **filters: Any) -> int:
        query = select(func.count()).select_from(self.model).where(*criteria).filter_by(**filters)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def list(self, *criteria: ColumnElement[bool], **filters: Any) -> List[ModelT]:
        query = select(self.model).where(*criteria).filter_by(**filters)
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())

    async def list_and_count(
        self,
        *criteria: ColumnElement[bool],
        limit: int = 20,
        offset: int = 0,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Tuple[List[ModelT], int]:
        """
        One page of rows plus the total matching `criteria`.

        Args:
            criteria:   SQLAlchemy boolean expressions (e.g. User.is_active.is_(True))
            limit:      page size
            offset:     rows to skip
            order_by:   column attribute name; defaults to created_at when present
            descending: sort direction
        """
        query = select(self.model).where(*criteria)
        column = self._order_column(order_by)
        if column is not None:
            query = query.order_by(column.desc() if descending else column.asc())
        query = query.limit(limit).offset(offset)

        result = await self.session.execute(query)
        items = list(result.unique().scalars().all())
        total = await self.count(*criteria)
        return items, total

    def _order_column(self, order_by: Optional[str]):
        name = order_by or "created_at"
        column = getattr(self.model, name, None)
        if column is None or not hasattr(column, "asc"):
            return None
        return column

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, data: Dict[str, Any]) -> ModelT:
        """Insert a new row built from `data` and return it with generated values."""
        item = self.model(**data)
        self.session.add(item)
        await self._flush(item)
        await self.session.refresh(item)
        return item

    async def update(self, item: ModelT, data: Dict[str, Any]) -> ModelT:
        """Apply attribute changes from `data` (only the keys present) and flush."""
        for key, value in data.items():
            setattr(item, key, value)
        await self._flush(item)
        return item

    async def delete(self, item_id: UUID) -> ModelT:
        item = await self.get(item_id)
        await self.session.delete(item)
        await self._flush(item)
        return item

    async def _flush(self, item: Optional[ModelT] = None) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Integrity error writing %s: %s", self.resource_name, e.orig)
            raise ConflictError(
                message=f"A {self.resource_name} with these values already exists",
                context={"resource": self.resource_name},
            )
        except SQLAlchemyError as e:
            logger.error("Database error writing %s: %s", self.resource_name, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def refresh(self, item: ModelT, attribute_names: Optional[Sequence[str]] = None) -> ModelT:
        await self.session.refresh(item, attribute_names=attribute_names)
        return item

    async def commit(self) -> None:
        """
        Commit the session's transaction now instead of at request teardown.

        Call before handing row ids to another process (e.g. a SAQ job);
        other connections only see committed rows.
        """
        await self._flush()
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Database error committing %s: %s", self.resource_name, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})
