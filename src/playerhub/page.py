"""Host page description: elements players attach to and where assets load from."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Element:
    """A page element a player is bound to. Only ``id`` is used for identity."""

    id: str
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class PageContext:
    """Where the player was loaded from.

    ``script_url`` is the URL of the loader script, ``load_origin`` the
    location assets are served from when no ``base`` is configured and
    ``protocol`` the scheme of the embedding page (``"http:"`` or
    ``"https:"``). ``elements`` maps element ids to elements; when it is
    ``None`` any id is accepted and an element is created for it.
    """

    script_url: str | None = None
    load_origin: str = ""
    protocol: str = "https:"
    elements: Mapping[str, Element] | None = None

    @property
    def script_dir(self) -> str | None:
        if not self.script_url:
            return None
        return self.script_url[: self.script_url.rfind("/") + 1] or None

    def get_element_by_id(self, element_id: str) -> Element | None:
        if self.elements is None:
            return Element(element_id)
        return self.elements.get(element_id)
