"""Library aggregation: owner-bucketed collections and the application builder.

Usage::

    builder = ApplicationBuilder()
    builder.add(LibraryContribution("Shop", pages=[PageDescriptor("/cart", "Cart")]))
    builder.add(LibraryContribution("Blog", pages=[PageDescriptor("/posts", "Posts")]))
    builder.remove("Shop")
    registry = builder.build()
"""

from folio.registry.application import ApplicationBuilder
from folio.registry.collection import (
    CollectionBuilder,
    ComponentCollectionBuilder,
    PageCollectionBuilder,
)

__all__ = [
    "ApplicationBuilder",
    "CollectionBuilder",
    "ComponentCollectionBuilder",
    "PageCollectionBuilder",
]
