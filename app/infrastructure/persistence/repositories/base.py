"""Base repositories: generic CRUD plus agency isolation for agency-owned tables."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import ValidationException
from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update, delete.

    Subclasses map ORM rows to application DTOs in their public methods;
    these generic methods return ORM instances.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and reload server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes made to a row loaded in this session and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    @staticmethod
    def _apply(obj: ModelType, changes: dict[str, Any]) -> None:
        """Set attributes from a changes dict; unknown keys are a programming error."""
        for key, value in changes.items():
            if not hasattr(obj, key):
                raise ValueError(f"{type(obj).__name__} has no attribute {key!r}")
            setattr(obj, key, value)


class AgencyScopedRepository(BaseRepository[ModelType]):
    """Repository that enforces agency isolation.

    Constructed for one agency_id; every read filters on it and every write
    rejects a row belonging to another agency. A row of another agency is
    indistinguishable from a missing row.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType], agency_id: str) -> None:
        super().__init__(db, model)
        self._agency_id = agency_id

    @property
    def agency_id(self) -> str:
        return self._agency_id

    def _assert_agency(self, obj: ModelType, operation: str) -> None:
        """Raise if obj.agency_id does not match this repo's agency."""
        if getattr(obj, "agency_id", None) != self._agency_id:
            raise ValidationException(
                f"Cannot {operation} entity belonging to another agency",
                field="agency_id",
            )

    def _scoped(self) -> Select[Any]:
        """SELECT of this model restricted to the repo's agency."""
        model: Any = self.model
        return select(self.model).where(model.agency_id == self._agency_id)

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key and agency_id, or None."""
        model: Any = self.model
        result = await self.db.execute(self._scoped().where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist; obj.agency_id must match this repo."""
        self._assert_agency(obj, "create")
        return await super().create(obj)

    async def update(self, obj: ModelType) -> ModelType:
        self._assert_agency(obj, "update")
        return await super().update(obj)

    async def delete(self, obj: ModelType) -> None:
        self._assert_agency(obj, "delete")
        await super().delete(obj)
