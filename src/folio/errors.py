"""Folio exception hierarchy.

Shared across the collection builders, the application builder,
discovery, and the CLI so every module raises and catches the same types.
"""


class FolioError(Exception):
    """Base for all folio-specific errors."""


class ConfigurationError(FolioError):
    """Raised when builder configuration is invalid.

    Typically an unknown conflict policy name passed on the command line.
    """


class DuplicateLibraryError(FolioError):
    """A library with the same name was already added to the builder.

    This is a caller bug: each library contributes exactly once.  The
    builder is left exactly as it was before the failing ``add()``.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Library already defined: {name!r}")


class ConflictingDescriptorError(FolioError):
    """Two descriptors share a merge key.

    Raised for duplicates inside one library's contribution, and for
    duplicates across libraries when the builder uses the strict
    conflict policy.
    """

    def __init__(self, key: str, owners: tuple[str, ...]) -> None:
        self.key = key
        self.owners = owners
        if len(set(owners)) == 1:
            detail = f"contributed twice by {owners[0]!r}"
        else:
            detail = "contributed by " + ", ".join(repr(o) for o in owners)
        super().__init__(f"Conflicting descriptor {key!r}: {detail}")


class DiscoveryError(FolioError):
    """A library directory could not be discovered."""
