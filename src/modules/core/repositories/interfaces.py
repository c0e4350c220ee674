"""Repository base contract.

Storefront services receive a repository through their constructor and
only talk to these abstract methods, so unit tests may hand them any
implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

ModelT = TypeVar("ModelT")


class IRepository(ABC, Generic[ModelT]):
    """CRUD surface shared by the product, order, coupon and review stores."""

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[ModelT]:
        """Row with this primary key, or ``None`` when absent."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[ModelT]:
        ...

    @abstractmethod
    def save(self, entity: ModelT) -> ModelT:
        ...

    @abstractmethod
    def delete(self, id: Any) -> bool:
        """Remove the row; soft-deletable models keep a tombstone."""
