"""Generic repository interface shared by every entity store."""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Sequence, TypeVar


T = TypeVar("T")

Include = Optional[Sequence[str]]


class Repository(ABC, Generic[T]):
    """
    Abstract store over one entity kind.

    Mutations are queued against the owning session and persist only when the
    unit of work saves. Repositories never own a transaction.
    """

    @abstractmethod
    def get_by_id(self, entity_id: Any, include: Include = None) -> T:
        """Retrieve an entity by key.

        Raises:
            EntityNotFoundError: If the key does not resolve
        """
        pass

    @abstractmethod
    def get_all(self, include: Include = None) -> List[T]:
        pass

    @abstractmethod
    def find(self, *criteria: Any, include: Include = None) -> List[T]:
        """List entities matching every criterion."""
        pass

    @abstractmethod
    def single_or_default(self, *criteria: Any, include: Include = None) -> Optional[T]:
        """Return the only match, or None when nothing matches."""
        pass

    @abstractmethod
    def add(self, entity: T) -> None:
        pass

    @abstractmethod
    def add_range(self, entities: Iterable[T]) -> None:
        pass

    @abstractmethod
    def remove(self, entity: T) -> None:
        pass

    @abstractmethod
    def remove_range(self, entities: Iterable[T]) -> None:
        pass

    @abstractmethod
    def update(self, entity: T) -> None:
        """Queue the whole entity as the replacement for its stored row."""
        pass
