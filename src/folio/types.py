"""Data models for library contributions and the built registry.

Immutable frozen dataclasses.  Descriptors are produced by a discovery
mechanism, folded into the builders grouped by owning library, and
flattened into a :class:`Registry` when the application builder builds.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol, TypeVar


class Keyed(Protocol):
    """Anything the collection builders can merge: it exposes a merge key."""

    @property
    def key(self) -> str: ...


@dataclass(frozen=True, slots=True)
class PageDescriptor:
    """A routable page contributed by a library.

    Attributes:
        route: URL pattern (e.g., ``/doc/{doc_id}``).  The merge key.
        component: Name of the component type that renders the page.
        name: Optional route name.
    """

    route: str
    component: str
    name: str | None = None

    @property
    def key(self) -> str:
        return self.route


@dataclass(frozen=True, slots=True)
class ComponentDescriptor:
    """A non-routable component contributed by a library.

    Attributes:
        type_name: Component type name (e.g., ``forms.text_input``).  The merge key.
        template: Template path relative to the library, if any.
        parameters: Declared parameter names, in declaration order.
    """

    type_name: str
    template: str | None = None
    parameters: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return self.type_name


@dataclass(frozen=True, slots=True)
class LibraryContribution:
    """Everything one library contributes, added to a builder atomically."""

    name: str
    pages: tuple[PageDescriptor, ...] = ()
    components: tuple[ComponentDescriptor, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from producers; store tuples so the value stays immutable
        object.__setattr__(self, "pages", tuple(self.pages))
        object.__setattr__(self, "components", tuple(self.components))


@dataclass(frozen=True, slots=True)
class Registry:
    """The built application registry.

    Ordered page and component collections with no ownership
    information.  Order is library insertion order, then declaration
    order within each library; consumers rely on it for precedence.
    """

    pages: tuple[PageDescriptor, ...] = ()
    components: tuple[ComponentDescriptor, ...] = ()
    # Read-only lookup indexes, filled in __post_init__
    _pages_by_route: Mapping[str, PageDescriptor] = field(init=False, repr=False, compare=False)
    _components_by_type: Mapping[str, ComponentDescriptor] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pages", tuple(self.pages))
        object.__setattr__(self, "components", tuple(self.components))
        # First occurrence wins the lookup, matching collection precedence
        object.__setattr__(self, "_pages_by_route", MappingProxyType(_first_by_key(self.pages)))
        object.__setattr__(self, "_components_by_type", MappingProxyType(_first_by_key(self.components)))

    @property
    def routes(self) -> tuple[str, ...]:
        return tuple(page.route for page in self.pages)

    def page_for(self, route: str) -> PageDescriptor | None:
        """Look up a page by route. Returns ``None`` if not found."""
        return self._pages_by_route.get(route)

    def component_for(self, type_name: str) -> ComponentDescriptor | None:
        """Look up a component by type name. Returns ``None`` if not found."""
        return self._components_by_type.get(type_name)

    def __len__(self) -> int:
        return len(self.pages) + len(self.components)


D = TypeVar("D", bound=Keyed)


def _first_by_key(descriptors: Iterable[D]) -> dict[str, D]:
    index: dict[str, D] = {}
    for descriptor in descriptors:
        index.setdefault(descriptor.key, descriptor)
    return index
