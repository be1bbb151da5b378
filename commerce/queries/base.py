"""Base element query.

Provides the criteria storage, generic filters, ordering, windowing and
execution methods that every element query inherits.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from commerce.logging import get_logger
from commerce.queries.params import parse_date_param, parse_param

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass
class ElementCriteria:
    id: Any = None
    date_created: Any = None
    date_updated: Any = None
    order_by: list[tuple[str, str]] | None = None
    limit: int | None = None
    offset: int | None = None

    def populated(self) -> dict[str, Any]:
        """Return the criteria that currently hold a value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) not in (None, "", [])
        }


class ElementQuery(Generic[T]):
    """Base class for element queries.

    Setter methods store criteria on ``self.criteria`` and return the same
    instance so calls can be chained. Nothing touches the database until one
    of the execution methods runs, at which point :meth:`_before_prepare`
    turns the populated criteria into predicates.

    Subclasses should:
    1. Set ``model_class`` to the SQLAlchemy model
    2. Set ``criteria_class`` to an :class:`ElementCriteria` subclass
    3. Define ``ordering_fields`` and ``default_order_by``
    4. Extend ``settable`` with their setter names and override
       :meth:`_before_prepare`, calling ``super()`` last
    """

    model_class: type[T]
    criteria_class: ClassVar[type[ElementCriteria]] = ElementCriteria
    ordering_fields: ClassVar[dict[str, Any]] = {}
    default_order_by: ClassVar[tuple[str, str]] = ("id", "asc")
    settable: ClassVar[frozenset[str]] = frozenset(
        {"id", "date_created", "date_updated", "order_by", "limit", "offset"}
    )

    def __init__(self, db: Session, **config: Any):
        self.db = db
        self.criteria = self.criteria_class()
        self._eager_options: list[Any] = []
        for name, value in config.items():
            if name not in self.settable:
                raise TypeError(f"{type(self).__name__} has no criteria named '{name}'.")
            getattr(self, name)(value)

    # -------------------------------------------------------------------------
    # Generic criteria
    # -------------------------------------------------------------------------

    def id(self, value: Any) -> Self:
        self.criteria.id = value
        return self

    def date_created(self, value: Any) -> Self:
        self.criteria.date_created = value
        return self

    def date_updated(self, value: Any) -> Self:
        self.criteria.date_updated = value
        return self

    def order_by(self, field_name: str | tuple[str, str] | None, direction: str | None = None) -> Self:
        """Replace the ordering.

        Accepts ``("date_ordered", "desc")``, ``"date_ordered desc"`` or a
        field name plus direction. Fields missing from ``ordering_fields`` are
        ignored. ``None`` restores the default ordering.
        """
        if field_name is None:
            self.criteria.order_by = None
            return self
        if isinstance(field_name, (tuple, list)):
            field_name, direction = field_name
        elif direction is None and " " in field_name.strip():
            field_name, direction = field_name.strip().split(None, 1)
        direction = (direction or "asc").lower()
        if field_name in self.ordering_fields:
            self.criteria.order_by = [(field_name, "desc" if direction == "desc" else "asc")]
        return self

    def limit(self, value: int | None) -> Self:
        self.criteria.limit = value
        return self

    def offset(self, value: int | None) -> Self:
        self.criteria.offset = value
        return self

    def with_relations(self) -> Self:
        """Eager load the model's relationships; subclasses pick which ones."""
        return self

    # -------------------------------------------------------------------------
    # Preparation
    # -------------------------------------------------------------------------

    def _before_prepare(self, query: Query) -> Query:
        """Apply the generic element predicates."""
        model = self.model_class
        if self.criteria.id:
            query = and_where(query, parse_param(model.id, self.criteria.id))
        if self.criteria.date_created:
            query = and_where(
                query, parse_date_param(model.date_created, self.criteria.date_created)
            )
        if self.criteria.date_updated:
            query = and_where(
                query, parse_date_param(model.date_updated, self.criteria.date_updated)
            )
        return query

    def _prepare(self, windowed: bool = True) -> Query:
        query = self.db.query(self.model_class)
        if self._eager_options:
            query = query.options(*self._eager_options)
        query = self._before_prepare(query)

        for field_name, direction in self.criteria.order_by or [self.default_order_by]:
            column = self.ordering_fields[field_name]
            query = query.order_by(desc(column) if direction == "desc" else asc(column))

        if windowed:
            if self.criteria.limit is not None and self.criteria.limit > 0:
                query = query.limit(self.criteria.limit)
            if self.criteria.offset:
                query = query.offset(self.criteria.offset)

        logger.debug(
            "Prepared %s",
            type(self).__name__,
            extra={"criteria": self.criteria.populated()},
        )
        return query

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def all(self) -> list[T]:
        """Execute the query and return all results."""
        return self._prepare().all()

    def one(self) -> T | None:
        """Return the first result, or None when nothing matches."""
        return self._prepare().first()

    def nth(self, n: int) -> T | None:
        """Return the zero-based nth result within the limit window, or None."""
        if n < 0:
            return None
        limit = self.criteria.limit
        if limit is not None and limit > 0 and n >= limit:
            return None
        start = (self.criteria.offset or 0) + n
        return self._prepare(windowed=False).offset(start).first()

    def count(self) -> int:
        """Return the number of matching records, ignoring limit and offset."""
        return self._prepare(windowed=False).order_by(None).count()

    def exists(self) -> bool:
        query = self._prepare(windowed=False).order_by(None)
        return self.db.query(query.exists()).scalar()

    def ids(self) -> list[Any]:
        return [element.id for element in self.all()]

    def query(self) -> Query:
        """Return the prepared SQLAlchemy Query object."""
        return self._prepare()


def and_where(query: Query, predicate) -> Query:
    if predicate is None:
        return query
    return query.filter(predicate)
