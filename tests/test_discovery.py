"""Tests for folio.discovery — filesystem library discovery."""

from pathlib import Path

import pytest

from folio.config import BuilderConfig, ConflictPolicy
from folio.discovery import discover_libraries, discover_library
from folio.errors import ConflictingDescriptorError, DiscoveryError, DuplicateLibraryError


def _touch(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def shop(tmp_path: Path) -> Path:
    root = tmp_path / "shop"
    _touch(root / "pages" / "page.py")
    _touch(root / "pages" / "cart.py")
    _touch(root / "pages" / "_helpers.py")
    _touch(root / "pages" / "products" / "{product_id}" / "page.py")
    _touch(root / "pages" / "products" / "{product_id}" / "reviews.py")
    _touch(root / "pages" / "_private" / "page.py")
    _touch(root / "pages" / "notes.txt")
    _touch(root / "pages" / ".hidden" / "page.py")
    _touch(root / "pages" / ".hidden" / "secret.py")
    _touch(root / "components" / "price_tag.html", "{# params: amount, currency #}\n<span></span>")
    _touch(root / "components" / "forms" / "quantity.html", "<input>")
    _touch(root / "components" / "_partial.html")
    _touch(root / "components" / "_internal" / "frame.html")
    _touch(root / "components" / ".cache" / "stale.html")
    return root


class TestDiscoverLibrary:
    def test_routes(self, shop: Path) -> None:
        library = discover_library(shop)
        assert [page.route for page in library.pages] == [
            "/cart",
            "/",
            "/products/{product_id}",
            "/products/{product_id}/reviews",
        ]

    def test_page_component_is_relative_module(self, shop: Path) -> None:
        library = discover_library(shop)
        components = {page.route: page.component for page in library.pages}
        assert components["/"] == "page"
        assert components["/products/{product_id}"] == "products/{product_id}/page"

    def test_components(self, shop: Path) -> None:
        library = discover_library(shop)
        assert [c.type_name for c in library.components] == ["forms.quantity", "price_tag"]
        price_tag = library.components[1]
        assert price_tag.template == "price_tag.html"
        assert price_tag.parameters == ("amount", "currency")
        assert library.components[0].parameters == ()

    def test_name_defaults_to_directory(self, shop: Path) -> None:
        assert discover_library(shop).name == "shop"
        assert discover_library(shop, name="Shop.Core").name == "Shop.Core"

    def test_empty_library(self, tmp_path: Path) -> None:
        library = discover_library(tmp_path)
        assert library.pages == ()
        assert library.components == ()

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError, match="not found"):
            discover_library(tmp_path / "missing")

    def test_hidden_page_directories_skipped(self, shop: Path) -> None:
        library = discover_library(shop)
        components = [page.component for page in library.pages]
        assert not any(c.startswith((".hidden", "_private")) for c in components)
        assert not any(".hidden" in page.route for page in library.pages)

    def test_hidden_component_directories_skipped(self, shop: Path) -> None:
        templates = [c.template for c in discover_library(shop).components]
        assert "_internal/frame.html" not in templates
        assert ".cache/stale.html" not in templates
        assert "_partial.html" not in templates

    def test_unreadable_template(self, tmp_path: Path) -> None:
        badge = tmp_path / "lib" / "components" / "badge.html"
        badge.parent.mkdir(parents=True)
        badge.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(DiscoveryError, match="Cannot read component template") as exc_info:
            discover_library(tmp_path / "lib")
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


class TestDiscoverLibraries:
    def test_builds_application(self, shop: Path, tmp_path: Path) -> None:
        blog = tmp_path / "blog"
        _touch(blog / "pages" / "posts.py")
        builder = discover_libraries([shop, blog])
        assert builder.has_assembly("shop")
        assert builder.has_assembly("blog")
        assert builder.build().routes[-1] == "/posts"

    def test_duplicate_names(self, tmp_path: Path) -> None:
        _touch(tmp_path / "a" / "lib" / "pages" / "page.py")
        _touch(tmp_path / "b" / "lib" / "pages" / "other.py")
        with pytest.raises(DuplicateLibraryError):
            discover_libraries([tmp_path / "a" / "lib", tmp_path / "b" / "lib"])

    def test_conflicting_routes_follow_policy(self, tmp_path: Path) -> None:
        _touch(tmp_path / "one" / "pages" / "page.py")
        _touch(tmp_path / "two" / "pages" / "page.py")
        paths = [tmp_path / "one", tmp_path / "two"]
        with pytest.raises(ConflictingDescriptorError):
            discover_libraries(paths)

        config = BuilderConfig(conflict_policy=ConflictPolicy.FIRST_WINS)
        registry = discover_libraries(paths, config).build()
        assert registry.routes == ("/",)
