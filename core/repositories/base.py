"""Generic repository: keyed reads and writes over one model."""

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from core.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Keyed CRUD over ``model``. Writes flush but never commit; the request's
    session decides that.

    Usage:
        class IssueRepository(BaseRepository[Issue]):
            model = Issue

        issue = IssueRepository(session).get_by_id("65f1c0de0000000000000000")
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: str) -> T | None:
        return self.session.get(self.model, id)

    def create(self, **kwargs: Any) -> T:
        """Insert and flush so store-assigned fields are populated."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def update(self, id: str, **kwargs: Any) -> T | None:
        """Set the given attributes. None when the record does not exist."""
        instance = self.get_by_id(id)
        if instance is None:
            return None
        for key, value in kwargs.items():
            if not hasattr(instance, key):
                raise ValueError(f"Unknown field: {key}")
            setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete(self, id: str) -> bool:
        """Whether a record was removed."""
        instance = self.get_by_id(id)
        if instance is None:
            return False
        self.session.delete(instance)
        self.session.flush()
        return True
