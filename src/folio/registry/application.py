"""Application builder: the set of known libraries plus their pages and components.

Three records evolve together: the library name set, the page
collection, and the component collection.  A name is tracked if and
only if its descriptors (possibly none) are in both collections.

Additions plan the page and component changes first and apply them
only once both plans validated, together with the name set update, so
an error leaves the builder exactly as it was.  Removals cannot fail.

Usage::

    builder = ApplicationBuilder()
    builder.add(LibraryContribution("Lib1", pages=[PageDescriptor("/a", "Index")]))
    registry = builder.build()
"""

import logging

from folio.config import BuilderConfig
from folio.errors import DuplicateLibraryError
from folio.registry.collection import ComponentCollectionBuilder, PageCollectionBuilder
from folio.types import LibraryContribution, Registry

logger = logging.getLogger("folio.registry")


class ApplicationBuilder:
    """Accumulates library contributions into one application registry.

    Not thread-safe: composition happens in a single setup phase, and
    callers that compose from several threads must hold their own lock.
    """

    __slots__ = ("_components", "_config", "_libraries", "_pages")

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self._config = config or BuilderConfig()
        policy = self._config.conflict_policy
        self._libraries: set[str] = set()
        self._pages = PageCollectionBuilder(policy)
        self._components = ComponentCollectionBuilder(policy)

    @property
    def config(self) -> BuilderConfig:
        return self._config

    @property
    def libraries(self) -> frozenset[str]:
        """Names of every tracked library."""
        return frozenset(self._libraries)

    def has_assembly(self, name: str) -> bool:
        """Whether a library called ``name`` has been added."""
        return name in self._libraries

    # -- Mutation --------------------------------------------------------

    def add(self, library: LibraryContribution) -> None:
        """Add one library's pages and components.

        Raises:
            DuplicateLibraryError: ``library.name`` is already tracked.
            ConflictingDescriptorError: The contribution repeats a key,
                or collides with another library under the strict policy.
        """
        if library.name in self._libraries:
            raise DuplicateLibraryError(library.name)

        pages = self._pages.plan_library(library.name, library.pages)
        components = self._components.plan_library(library.name, library.components)

        self._pages.apply(pages)
        self._components.apply(components)
        self._libraries.add(library.name)
        logger.debug(
            "Library %r added: %d page(s), %d component(s)",
            library.name,
            len(library.pages),
            len(library.components),
        )

    def combine(self, other: "ApplicationBuilder") -> None:
        """Merge every library tracked by ``other`` into this builder.

        ``other`` is only read; nothing of it is shared afterwards.
        Conflicts resolve with this builder's policy.
        """
        if other is self:
            return
        pages = self._pages.plan_union(other._pages)
        components = self._components.plan_union(other._components)

        self._pages.apply(pages)
        self._components.apply(components)
        self._libraries |= other._libraries
        logger.debug("Combined %d library(ies) into builder", len(other._libraries))

    def exclude(self, other: "ApplicationBuilder") -> None:
        """Drop every library tracked by ``other``, with all it contributed.

        Descriptors are removed by owner: a page whose route also appears
        in an excluded library survives when its own library is kept.
        """
        self._pages.difference(other._pages)
        self._components.difference(other._components)
        self._libraries -= other._libraries

    def remove(self, name: str) -> None:
        """Drop library ``name`` and every descriptor it owns. No-op if absent."""
        if name not in self._libraries:
            return
        self._pages.remove_owner(name)
        self._components.remove_owner(name)
        self._libraries.discard(name)
        logger.debug("Library %r removed", name)

    # -- Output ----------------------------------------------------------

    def build(self) -> Registry:
        """Project the current state into an immutable :class:`Registry`.

        The builder is not consumed and may keep being mutated.
        """
        return Registry(
            pages=self._pages.to_page_collection(),
            components=self._components.to_component_collection(),
        )

    def __contains__(self, name: object) -> bool:
        return name in self._libraries

    def __len__(self) -> int:
        return len(self._libraries)

    def __repr__(self) -> str:
        return f"ApplicationBuilder(libraries={sorted(self._libraries)!r})"
