"""Generic SQLAlchemy repository shared by every entity store."""

import functools
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import inspect, select
from sqlalchemy.exc import MultipleResultsFound, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from toystore.domain.exceptions import EntityNotFoundError, InvalidArgumentError, PersistenceError
from toystore.domain.repositories import Include, Repository

from ..mappers import IncludeTree


E = TypeVar("E")
M = TypeVar("M")

STORAGE_FAILED = "An error occurred while accessing the database."


def storage_operation(method: Callable) -> Callable:
    """
    Wrap SQLAlchemy errors raised by a repository method in PersistenceError.

    The owning unit of work is told first, so an Idle one rolls its session
    back and stays usable. Nested storage operations report a failure once.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self._storage_failed()
            raise PersistenceError(f"{STORAGE_FAILED} ({type(self).__name__}.{method.__name__})") from e

    return wrapper


def parse_include(paths: Optional[Sequence[str]]) -> IncludeTree:
    """Turn ("details.product", "category") into a nested relationship tree."""
    if isinstance(paths, str):
        paths = (paths,)
    tree: IncludeTree = {}
    for path in paths or ():
        node = tree
        for name in path.split("."):
            node = node.setdefault(name, {})
    return tree


def loader_options(model: type, tree: IncludeTree, parent=None) -> list:
    """Build chained selectinload options for an include tree."""
    relationships = inspect(model).relationships
    options = []
    for name, children in tree.items():
        if name not in relationships:
            raise InvalidArgumentError(f"{model.__name__} has no relationship named '{name}'")
        attribute = getattr(model, name)
        option = selectinload(attribute) if parent is None else parent.selectinload(attribute)
        options.append(option)
        options.extend(loader_options(relationships[name].mapper.class_, children, option))
    return options


class SqlAlchemyRepository(Repository[E], Generic[E, M]):
    """
    Repository over one ORM model, returning detached domain entities.

    Subclasses set:
        model: ORM model class
        mapper: static mapper with to_domain / to_persistence / update_persistence
        key: primary key attribute name (same on entity and model)
        default_include: relationships eager-loaded when include is None
        not_found_error: EntityNotFoundError subclass raised on missing keys
    """

    model: Type[M]
    mapper: Any
    key: str
    default_include: Tuple[str, ...] = ()
    not_found_error: Type[EntityNotFoundError] = EntityNotFoundError

    def __init__(self, session: Session, on_failure: Optional[Callable[[], None]] = None) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy session owned by the unit of work
            on_failure: Unit of work callback run when a statement fails,
                before PersistenceError is raised
        """
        self._session = session
        self._on_failure = on_failure
        # (entity, model) pairs added since the last save, for key write-back
        self._added: List[Tuple[E, M]] = []

    def _storage_failed(self) -> None:
        if self._on_failure is not None:
            self._on_failure()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _tree(self, include: Include) -> IncludeTree:
        return parse_include(self.default_include if include is None else include)

    def _key_column(self):
        return getattr(self.model, self.key)

    def _order_by(self) -> tuple:
        return (self._key_column(),)

    def _select(self, *criteria: Any, include: Include = None, order_by: Optional[tuple] = None):
        tree = self._tree(include)
        stmt = select(self.model).options(*loader_options(self.model, tree))
        if criteria:
            stmt = stmt.where(*criteria)
        return stmt.order_by(*(order_by if order_by is not None else self._order_by())), tree

    @storage_operation
    def _list(self, *criteria: Any, include: Include = None, order_by: Optional[tuple] = None,
              limit: Optional[int] = None) -> List[E]:
        stmt, tree = self._select(*criteria, include=include, order_by=order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        models = self._session.scalars(stmt).all()
        return [self.mapper.to_domain(model, tree) for model in models]

    @storage_operation
    def get_by_id(self, entity_id: Any, include: Include = None) -> E:
        stmt, tree = self._select(self._key_column() == entity_id, include=include)
        model = self._session.scalars(stmt).one_or_none()
        if model is None:
            raise self.not_found_error(entity_id)
        return self.mapper.to_domain(model, tree)

    def get_all(self, include: Include = None) -> List[E]:
        return self._list(include=include)

    def find(self, *criteria: Any, include: Include = None) -> List[E]:
        return self._list(*criteria, include=include)

    @storage_operation
    def single_or_default(self, *criteria: Any, include: Include = None) -> Optional[E]:
        stmt, tree = self._select(*criteria, include=include)
        try:
            model = self._session.scalars(stmt).one_or_none()
        except MultipleResultsFound as e:
            raise InvalidArgumentError(
                f"More than one {self.model.__name__} matched the criteria"
            ) from e
        if model is None:
            return None
        return self.mapper.to_domain(model, tree)

    # ------------------------------------------------------------------
    # Mutations (queued until the unit of work saves)
    # ------------------------------------------------------------------

    def _require(self, entity: Optional[E]) -> E:
        if entity is None:
            raise InvalidArgumentError(f"{self.model.__name__} entity cannot be None")
        return entity

    def _require_all(self, entities: Optional[Iterable[E]]) -> List[E]:
        if entities is None:
            raise InvalidArgumentError("Entities cannot be None")
        entities = list(entities)
        for entity in entities:
            self._require(entity)
        return entities

    @storage_operation
    def _tracked_model(self, entity: E) -> M:
        """Find the session model behind an entity (pending or persisted)."""
        for added, model in self._added:
            if added is entity:
                return model
        entity_id = getattr(entity, self.key)
        model = self._session.get(self.model, entity_id) if entity_id is not None else None
        if model is None:
            raise self.not_found_error(entity_id)
        return model

    def add(self, entity: E) -> None:
        self._require(entity)
        model = self.mapper.to_persistence(entity)
        self._session.add(model)
        self._added.append((entity, model))

    def add_range(self, entities: Iterable[E]) -> None:
        for entity in self._require_all(entities):
            self.add(entity)

    def remove(self, entity: E) -> None:
        self._require(entity)
        model = self._tracked_model(entity)
        if model in self._session.new:
            self._session.expunge(model)
            self._added = [(e, m) for e, m in self._added if m is not model]
        else:
            self._session.delete(model)

    def remove_range(self, entities: Iterable[E]) -> None:
        entities = self._require_all(entities)
        models = [self._tracked_model(entity) for entity in entities]
        for entity, _ in zip(entities, models):
            self.remove(entity)

    def update(self, entity: E) -> None:
        self._require(entity)
        model = self._tracked_model(entity)
        self.mapper.update_persistence(entity, model)

    # ------------------------------------------------------------------
    # Unit of work hooks
    # ------------------------------------------------------------------

    def sync_keys(self) -> None:
        """Copy generated keys back onto entities added since the last save."""
        for entity, model in self._added:
            setattr(entity, self.key, getattr(model, self.key))
        self._added.clear()

    def discard_pending(self) -> None:
        """Forget queued additions after a rollback."""
        self._added.clear()
