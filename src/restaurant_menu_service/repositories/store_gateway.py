"""Relational store gateway interface.

This module defines the abstract gateway every repository talks to. It exposes
only the capabilities the service needs (filtered and ordered selects with
embedded relations, inserts, partial updates, deletes) so the store can be
swapped for a test double.

Store failures are raised as UpstreamQueryError; an empty result is an empty
list, never an error.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Filter:
    """Column predicate applied to a store query.

    Attributes:
        column: Column name, dotted for embedded tables (e.g. 'menu.is_active')
        operator: One of 'eq', 'neq', 'in', 'ilike', 'is'
        value: Comparison value; a sequence for 'in', a %-pattern for 'ilike'
    """

    column: str
    operator: str
    value: Any


@dataclass(frozen=True)
class Order:
    """Ordering clause, optionally applied to an embedded table.

    Attributes:
        column: Column to order by
        ascending: Sort direction
        foreign_table: Embedded table path (e.g. 'menu.menu_item') or None for the root
    """

    column: str
    ascending: bool = True
    foreign_table: str | None = None


def eq(column: str, value: Any) -> Filter:
    """Equality predicate."""
    return Filter(column, "eq", value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    """Membership predicate."""
    return Filter(column, "in", tuple(values))


def ilike(column: str, pattern: str) -> Filter:
    """Case-insensitive pattern predicate using % wildcards."""
    return Filter(column, "ilike", pattern)


class StoreGateway(ABC):
    """Abstract gateway to the relational store."""

    @abstractmethod
    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows, with embedded relations described in ``columns``.

        Args:
            table: Root table name
            columns: Column list, may embed related tables (e.g. 'menu_id, menu_item(*)')
            filters: Predicates combined with AND
            order: Ordering clauses for the root or embedded tables
            limit: Maximum number of root rows

        Returns:
            list: Matching rows, empty list if none

        Raises:
            UpstreamQueryError: If the store call fails
        """
        pass

    @abstractmethod
    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored.

        Raises:
            UpstreamQueryError: If the store call fails
        """
        pass

    @abstractmethod
    async def update(
        self, table: str, values: dict[str, Any], filters: Sequence[Filter]
    ) -> list[dict[str, Any]]:
        """Overwrite ``values`` on matching rows and return the updated rows.

        Raises:
            UpstreamQueryError: If the store call fails
        """
        pass

    @abstractmethod
    async def delete(self, table: str, filters: Sequence[Filter]) -> list[dict[str, Any]]:
        """Remove matching rows and return them.

        Raises:
            UpstreamQueryError: If the store call fails
        """
        pass

    async def close(self) -> None:
        """Release resources held by the gateway."""
        return None
