"""
Persistence adapter.

Every read and write the services perform against the store goes through a
repository. Store failures are rolled back and surfaced as PersistenceError.
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from perfdesk.core.exceptions import ConflictError, PersistenceError, ValidationError
from perfdesk.database import Base

ModelT = TypeVar("ModelT", bound=Base)

logger = logging.getLogger(__name__)


class SqlAlchemyRepository(Generic[ModelT]):
    model: Type[ModelT]

    def __init__(self, db: Session, model: Optional[Type[ModelT]] = None):
        self.db = db
        if model is not None:
            self.model = model

    def get(self, entity_id: int) -> Optional[ModelT]:
        return self.db.get(self.model, entity_id)

    def find(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Sequence[Any] = (),
    ) -> List[ModelT]:
        query = self.db.query(self.model)
        for field, value in (filters or {}).items():
            query = query.filter(getattr(self.model, field) == value)
        if order_by:
            query = query.order_by(*order_by)
        return query.all()

    def create(self, obj: ModelT) -> ModelT:
        self.db.add(obj)
        self._commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj: ModelT, changes: Dict[str, Any]) -> ModelT:
        """Apply `changes` column by column, then commit. Unknown columns are rejected."""
        columns = self._columns()
        unknown = set(changes) - columns
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for {self.model.__name__}: {', '.join(sorted(unknown))}"
            )
        for field, value in changes.items():
            setattr(obj, field, value)
        self._commit()
        self.db.refresh(obj)
        return obj

    def save(self, obj: ModelT) -> ModelT:
        """Commit pending attribute changes already made on `obj`."""
        self._commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: ModelT) -> None:
        self.db.delete(obj)
        self._commit()

    def _columns(self) -> set:
        return {attr.key for attr in inspect(self.model).column_attrs}

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error on {self.model.__name__}: {e.orig}")
            raise ConflictError(f"{self.model.__name__} conflicts with an existing record") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Persistence failure on {self.model.__name__}: {e}", exc_info=True)
            raise PersistenceError() from e
