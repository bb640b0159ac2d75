"""Filesystem discovery of library contributions.

Walks a library directory and describes what it contributes, without
importing any of its code:

- ``pages/``: ``.py`` route files become :class:`PageDescriptor` entries
- ``components/``: ``.html`` templates become :class:`ComponentDescriptor` entries

Directory names wrapped in ``{braces}`` become path parameters.
``page.py`` maps to the directory URL; other ``.py`` files append
their stem to the path.

Layout::

    shop/
      pages/
        page.py            # /
        cart.py            # /cart
        products/
          {product_id}/
            page.py        # /products/{product_id}
      components/
        price_tag.html     # price_tag
        forms/
          quantity.html    # forms.quantity
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from folio.config import BuilderConfig
from folio.errors import DiscoveryError
from folio.registry.application import ApplicationBuilder
from folio.types import ComponentDescriptor, LibraryContribution, PageDescriptor

logger = logging.getLogger("folio.discovery")

# Regex to extract {# params: a, b #} from component templates
_PARAMS_RE = re.compile(r"\{#\s*params:\s*(.*?)\s*#\}")

# Regex matching {param} directory names
_PARAM_DIR_RE = re.compile(r"^\{(\w+)\}$")


def discover_library(path: str | Path, name: str | None = None) -> LibraryContribution:
    """Describe the pages and components of one library directory.

    Args:
        path: Library root containing ``pages/`` and/or ``components/``.
        name: Library name.  Defaults to the directory name.

    Returns:
        The library's :class:`LibraryContribution`.

    Raises:
        DiscoveryError: If ``path`` is not a directory, or a component
            template cannot be read as UTF-8.
    """
    root = Path(path).resolve()
    if not root.is_dir():
        msg = f"Library directory not found: {root}"
        raise DiscoveryError(msg)

    pages: list[PageDescriptor] = []
    pages_dir = root / "pages"
    if pages_dir.is_dir():
        _walk_pages(pages_dir, pages_dir, url_parts=[], pages=pages)

    components: list[ComponentDescriptor] = []
    components_dir = root / "components"
    if components_dir.is_dir():
        components = [_component_from(file, components_dir) for file in _templates(components_dir)]

    library = LibraryContribution(name=name or root.name, pages=pages, components=components)
    logger.debug(
        "Discovered %r at %s: %d page(s), %d component(s)",
        library.name,
        root,
        len(library.pages),
        len(library.components),
    )
    return library


def discover_libraries(
    paths: Iterable[str | Path],
    config: BuilderConfig | None = None,
) -> ApplicationBuilder:
    """Discover every directory in ``paths`` and add it to a new builder.

    Raises whatever :meth:`ApplicationBuilder.add` raises, e.g.
    ``DuplicateLibraryError`` for two directories with the same name.
    """
    builder = ApplicationBuilder(config)
    for path in paths:
        builder.add(discover_library(path))
    return builder


def _walk_pages(
    directory: Path,
    root: Path,
    *,
    url_parts: list[str],
    pages: list[PageDescriptor],
) -> None:
    """Recursively walk a pages directory.

    Files at one level are visited before subdirectories, both sorted,
    so the resulting order is stable across platforms.
    """
    for item in sorted(directory.iterdir()):
        if not item.is_file() or item.suffix != ".py":
            continue
        if item.name.startswith("_"):
            continue
        pages.append(_page_from(item, root, url_parts))

    for item in sorted(directory.iterdir()):
        if not item.is_dir():
            continue
        if item.name.startswith("_") or item.name.startswith("."):
            continue

        param_match = _PARAM_DIR_RE.match(item.name)
        segment = "{" + param_match.group(1) + "}" if param_match else item.name
        _walk_pages(item, root, url_parts=[*url_parts, segment], pages=pages)


def _page_from(file: Path, root: Path, url_parts: list[str]) -> PageDescriptor:
    if file.stem == "page":
        route = "/" + "/".join(url_parts)
    else:
        route = "/" + "/".join([*url_parts, file.stem])

    component = file.relative_to(root).with_suffix("").as_posix()
    return PageDescriptor(route=route, component=component)


def _templates(directory: Path) -> list[Path]:
    return sorted(
        file
        for file in directory.rglob("*.html")
        if file.is_file()
        and not any(part.startswith(("_", ".")) for part in file.relative_to(directory).parts)
    )


def _component_from(file: Path, root: Path) -> ComponentDescriptor:
    relative = file.relative_to(root)
    type_name = ".".join(relative.with_suffix("").parts)

    try:
        source = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read component template {file}: {exc}"
        raise DiscoveryError(msg) from exc

    parameters: tuple[str, ...] = ()
    match = _PARAMS_RE.search(source)
    if match:
        parameters = tuple(p.strip() for p in match.group(1).split(",") if p.strip())

    return ComponentDescriptor(
        type_name=type_name,
        template=relative.as_posix(),
        parameters=parameters,
    )
