"""Instance registry: the ordered collection of live players.

``resolve(query)`` maps a caller's query to one of:

- a registered ``Api`` (found),
- ``CreateRequest(element)``: no player is bound to that element yet,
- ``Unresolvable``: nothing to return or create.

Query forms, in priority order: ``None``, ``""`` or ``False`` (first
player), ``str`` (element id), ``int`` (registration index), an element
object (anything with a string ``id``), anything else.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from playerhub.page import Element, PageContext

if TYPE_CHECKING:
    from playerhub.api import Api

logger = logging.getLogger(__name__)

# process-wide; never reset
_unique_ids = itertools.count(1)

__all__ = [
    "CreateRequest",
    "Element",
    "InstanceRegistry",
    "Resolution",
    "Unresolvable",
]


@dataclass(frozen=True)
class CreateRequest:
    element: Element


@dataclass(frozen=True)
class Unresolvable:
    query: Any
    reason: str


Resolution = Union["Api", CreateRequest, Unresolvable]


class InstanceRegistry:
    """Ordered, process-lifetime collection of players.

    Insertion order is creation order. Unique ids come from one process-wide
    counter, so they are never reused: not after ``clear()``, and not across
    registries (a replaced hub keeps counting where the old one stopped).
    """

    def __init__(self, page: PageContext | None = None) -> None:
        self.page = page
        self._instances: list[Api] = []

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[Api]:
        return iter(list(self._instances))

    def __contains__(self, instance: object) -> bool:
        return any(existing is instance for existing in self._instances)

    def register(self, instance: Api) -> Api:
        """Assign the next unique id to ``instance`` and append it."""
        instance._assign_unique_id(next(_unique_ids))
        self._instances.append(instance)
        logger.debug("Registered player %s (#%d)", instance.id, instance.unique_id)
        return instance

    def unregister(self, unique_id: int | None) -> bool:
        """Remove the player with ``unique_id``; returns False if it was absent."""
        for index, instance in enumerate(self._instances):
            if instance.unique_id == unique_id:
                del self._instances[index]
                logger.debug("Unregistered player %s (#%d)", instance.id, unique_id)
                return True
        return False

    def get(self, unique_id: int) -> Api | None:
        for instance in self._instances:
            if instance.unique_id == unique_id:
                return instance
        return None

    def by_element_id(self, element_id: str) -> Api | None:
        for instance in self._instances:
            if instance.id == element_id:
                return instance
        return None

    def clear(self) -> None:
        """Drop every entry. Ids keep counting up."""
        self._instances.clear()

    def resolve(self, query: Any = None) -> Resolution:
        # "", False and None all mean "no query"
        if query is None or query is False or (isinstance(query, str) and not query):
            if self._instances:
                return self._instances[0]
            return Unresolvable(query, "no players registered")

        if isinstance(query, str):
            found = self.by_element_id(query)
            if found is not None:
                return found
            element = (self.page or PageContext()).get_element_by_id(query)
            if element is None:
                return Unresolvable(query, f"no element with id {query!r}")
            return CreateRequest(element)

        if isinstance(query, int) and not isinstance(query, bool):
            if 0 <= query < len(self._instances):
                return self._instances[query]
            return Unresolvable(query, f"index {query} out of range")

        element_id = getattr(query, "id", None)
        if isinstance(element_id, str):
            found = self.by_element_id(element_id)
            if found is not None:
                return found
            element = query if isinstance(query, Element) else Element(element_id)
            return CreateRequest(element)

        return Unresolvable(query, f"unsupported query type {type(query).__name__}")
