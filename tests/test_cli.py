"""Tests for folio.cli — CLI entrypoint, argument parsing, and output."""

from pathlib import Path

import pytest

from folio.cli import main


def _touch(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def libs(tmp_path: Path) -> tuple[Path, Path]:
    shop = tmp_path / "shop"
    _touch(shop / "pages" / "cart.py")
    _touch(shop / "components" / "price_tag.html", "{# params: amount #}")
    blog = tmp_path / "blog"
    _touch(blog / "pages" / "page.py")
    return shop, blog


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_components_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["components", "--help"])
        assert exc_info.value.code == 0


class TestCLIMissingArgs:
    def test_routes_missing_libraries(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_unknown_policy(self, libs: tuple[Path, Path]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(libs[0]), "--policy", "newest"])
        assert exc_info.value.code == 2


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "folio" in captured.out


class TestRoutes:
    def test_table(self, libs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]) -> None:
        shop, blog = libs
        main(["routes", str(shop), str(blog)])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["ROUTE", "COMPONENT", "NAME"]
        assert lines[2].split() == ["/cart", "cart"]
        assert lines[3].split() == ["/", "page"]

    def test_no_pages(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", str(tmp_path)])
        assert "No pages registered." in capsys.readouterr().out

    def test_missing_library_exits_one(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(tmp_path / "missing")])
        assert exc_info.value.code == 1
        assert "Error: Library directory not found" in capsys.readouterr().err

    def test_conflict_exits_one_unless_policy(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _touch(tmp_path / "one" / "pages" / "page.py")
        _touch(tmp_path / "two" / "pages" / "page.py")
        args = ["routes", str(tmp_path / "one"), str(tmp_path / "two")]
        with pytest.raises(SystemExit) as exc_info:
            main(args)
        assert exc_info.value.code == 1
        assert "Conflicting descriptor '/'" in capsys.readouterr().err

        main([*args, "--policy", "last-wins"])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3


class TestComponents:
    def test_table(self, libs: tuple[Path, Path], capsys: pytest.CaptureFixture[str]) -> None:
        main(["components", *(str(p) for p in libs)])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["TYPE", "TEMPLATE", "PARAMS"]
        assert lines[2].split() == ["price_tag", "price_tag.html", "amount"]

    def test_unreadable_template_exits_one(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        badge = tmp_path / "shop" / "components" / "badge.html"
        badge.parent.mkdir(parents=True)
        badge.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(SystemExit) as exc_info:
            main(["components", str(tmp_path / "shop")])
        assert exc_info.value.code == 1
        assert "Error: Cannot read component template" in capsys.readouterr().err
