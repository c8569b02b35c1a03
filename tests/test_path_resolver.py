import os.path

import pytest

from localwebserver.path_resolver import (
    ResolvedTarget,
    get_extension,
    has_extension,
    is_servable,
    resolve_path,
    resolve_target,
)

WORKING_DIRECTORY = os.path.join(os.sep, "srv", "site")


class TestResolvePath:
    """Lexical mapping from URL paths to filesystem paths."""

    @pytest.mark.parametrize("url_path", ["", "/", "\\"])
    def test_root_is_home_page(self, url_path: str) -> None:
        assert resolve_path(url_path, WORKING_DIRECTORY) == resolve_path(
            "index.html", WORKING_DIRECTORY
        )

    def test_root_with_custom_home_page(self) -> None:
        assert resolve_path("/", WORKING_DIRECTORY, "home.htm") == "home.htm"

    def test_rooted_file(self) -> None:
        assert resolve_path("/assets/app.js", WORKING_DIRECTORY) == os.path.join(
            WORKING_DIRECTORY, "assets/app.js"
        )

    def test_rooted_directory(self) -> None:
        assert resolve_path("/docs", WORKING_DIRECTORY) == os.path.join(
            WORKING_DIRECTORY, "docs", "index.html"
        )

    def test_rooted_directory_uses_home_page(self) -> None:
        assert resolve_path("/docs", WORKING_DIRECTORY, "main.html") == os.path.join(
            WORKING_DIRECTORY, "docs", "main.html"
        )

    def test_backslash_rooted_file(self) -> None:
        assert resolve_path("\\style.css", WORKING_DIRECTORY) == os.path.join(
            WORKING_DIRECTORY, "style.css"
        )

    def test_relative_file_is_unchanged(self) -> None:
        assert resolve_path("not_found.html", WORKING_DIRECTORY) == "not_found.html"

    def test_relative_directory(self) -> None:
        assert resolve_path("docs", WORKING_DIRECTORY) == os.path.join(
            "docs", "index.html"
        )

    def test_dotfile_is_a_file(self) -> None:
        assert resolve_path("/.env", WORKING_DIRECTORY) == os.path.join(
            WORKING_DIRECTORY, ".env"
        )

    def test_trailing_dot_is_a_directory(self) -> None:
        assert resolve_path("/file.", WORKING_DIRECTORY) == os.path.join(
            WORKING_DIRECTORY, "file.", "index.html"
        )

    def test_parent_segments_are_kept(self) -> None:
        assert resolve_path("/../secret.txt", WORKING_DIRECTORY) == os.path.join(
            WORKING_DIRECTORY, "../secret.txt"
        )


class TestIsServable:
    """The three-way branch, not a plain existence check."""

    def test_existing_file_with_extension(self, tmp_path) -> None:
        path = tmp_path / "page.html"
        path.write_text("<p>hi</p>")
        assert is_servable(str(path))

    def test_existing_file_without_extension(self, tmp_path) -> None:
        path = tmp_path / "LICENSE"
        path.write_text("MIT")
        assert is_servable(str(path))

    def test_missing_without_extension(self, tmp_path) -> None:
        assert not is_servable(str(tmp_path / "missing"))

    def test_missing_html(self, tmp_path) -> None:
        assert not is_servable(str(tmp_path / "missing.html"))

    def test_missing_other_extension(self, tmp_path) -> None:
        assert is_servable(str(tmp_path / "missing.png"))

    def test_directory_with_extension(self, tmp_path) -> None:
        (tmp_path / "bundle.app").mkdir()
        assert is_servable(str(tmp_path / "bundle.app"))

    def test_missing_dotfile(self, tmp_path) -> None:
        assert is_servable(str(tmp_path / ".htaccess"))

    def test_missing_html_dotfile(self, tmp_path) -> None:
        assert not is_servable(str(tmp_path / ".html"))

    def test_directory_named_html(self, tmp_path) -> None:
        (tmp_path / "pages.html").mkdir()
        assert not is_servable(str(tmp_path / "pages.html"))


class TestResolveTarget:
    def test_valid(self, tmp_path) -> None:
        (tmp_path / "app.js").write_text("")
        assert resolve_target("/app.js", str(tmp_path)) == ResolvedTarget(
            filesystem_path=os.path.join(str(tmp_path), "app.js"), is_valid=True
        )

    def test_invalid(self, tmp_path) -> None:
        target = resolve_target("/missing", str(tmp_path))
        assert target.filesystem_path == os.path.join(
            str(tmp_path), "missing", "index.html"
        )
        assert not target.is_valid


def test_has_extension() -> None:
    assert has_extension("a/b.txt")
    assert has_extension("archive.tar.gz")
    assert not has_extension("a/b")
    assert not has_extension("a.d/b")
    assert has_extension(".env")
    assert has_extension("site/.htaccess")
    assert not has_extension("file.")
    assert not has_extension("site/file.")


def test_get_extension() -> None:
    assert get_extension("archive.tar.gz") == ".gz"
    assert get_extension("/srv/.env") == ".env"
    assert get_extension("dir\\page.html") == ".html"
    assert get_extension("file.") == ""
    assert get_extension("a.d/b") == ""
