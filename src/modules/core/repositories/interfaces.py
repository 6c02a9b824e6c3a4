"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that the catalog and
ledger repository interfaces extend.  Service-layer code depends on this
abstraction, never on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository
    (``Product``, ``Order``).  Identifiers are integer primary keys;
    look-ups return ``None`` instead of raising when nothing matches.
    """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[T]:
        """List entities matching the module's filter parameters.

        Raises ``InvalidFilters`` when a parameter fails validation.
        """

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Remove an entity by ID; ``False`` when it does not exist."""
