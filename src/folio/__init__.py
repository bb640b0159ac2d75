"""Folio: aggregate the pages and components of many libraries into one registry.

Each library contributes a name plus page and component descriptors.
The application builder tracks which libraries are present and keeps
their descriptors grouped by owner until it builds an immutable,
ordered registry.

Basic usage::

    from folio import ApplicationBuilder, LibraryContribution, PageDescriptor

    builder = ApplicationBuilder()
    builder.add(LibraryContribution("Lib1", pages=[PageDescriptor("/a", "Index")]))
    builder.add(LibraryContribution("Lib2", pages=[PageDescriptor("/b", "About")]))
    builder.remove("Lib1")

    registry = builder.build()
    registry.routes  # ("/b",)

Discovery from disk::

    from folio.discovery import discover_libraries
    builder = discover_libraries(["libs/shop", "libs/blog"])
"""

import importlib

__version__ = "0.1.0"
__all__ = [
    "ApplicationBuilder",
    "BuilderConfig",
    "ComponentCollectionBuilder",
    "ComponentDescriptor",
    "ConfigurationError",
    "ConflictPolicy",
    "ConflictingDescriptorError",
    "DiscoveryError",
    "DuplicateLibraryError",
    "FolioError",
    "LibraryContribution",
    "PageCollectionBuilder",
    "PageDescriptor",
    "Registry",
]


# Public name -> defining module.  Resolved on first attribute access.
_LAZY_IMPORTS: dict[str, str] = {
    "ApplicationBuilder": "folio.registry.application",
    "BuilderConfig": "folio.config",
    "ComponentCollectionBuilder": "folio.registry.collection",
    "ComponentDescriptor": "folio.types",
    "ConfigurationError": "folio.errors",
    "ConflictPolicy": "folio.config",
    "ConflictingDescriptorError": "folio.errors",
    "DiscoveryError": "folio.errors",
    "DuplicateLibraryError": "folio.errors",
    "FolioError": "folio.errors",
    "LibraryContribution": "folio.types",
    "PageCollectionBuilder": "folio.registry.collection",
    "PageDescriptor": "folio.types",
    "Registry": "folio.types",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import folio`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    module = importlib.import_module(module_path)
    return getattr(module, name)
