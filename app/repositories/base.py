"""Generic CRUD over a SQLAlchemy session.

Repositories flush but never commit: the router owns the unit of work
and decides when to commit or roll back.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from app.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    model: type[ModelType]

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, entity_id: str) -> ModelType | None:
        return self.db.get(self.model, entity_id)

    def list(self, **filters: Any) -> list[ModelType]:
        """Equality filters; ``None`` values are ignored."""
        query = self.db.query(self.model)
        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(self.model, field) == value)
        return query.order_by(*self._default_order()).all()

    def create(self, obj: ModelType) -> ModelType:
        self.db.add(obj)
        self.db.flush()
        self.db.refresh(obj)
        return obj

    def update(self, obj: ModelType, values: dict[str, Any]) -> ModelType:
        for field, value in values.items():
            setattr(obj, field, value)
        self.db.flush()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: ModelType) -> None:
        self.db.delete(obj)
        self.db.flush()

    def _default_order(self) -> tuple:
        return (self.model.created_at.asc(),)
