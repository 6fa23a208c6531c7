"""Tests for template loaders and Environment source lookup."""

import pytest

from kiln import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    TemplateLoadError,
    TemplateNotFoundError,
)


class TestFileSystemLoader:
    def test_get_source(self, tmp_path):
        (tmp_path / "a.txt").write_text("hello")
        source, filename = FileSystemLoader(tmp_path).get_source("a.txt")
        assert source == "hello"
        assert filename == str(tmp_path / "a.txt")

    def test_crlf_preserved(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"a\r\nb\r\n")
        source, _ = FileSystemLoader(tmp_path).get_source("a.txt")
        assert source == "a\r\nb\r\n"

    def test_search_order(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (first / "x.txt").write_text("first")
        (second / "x.txt").write_text("second")
        (second / "y.txt").write_text("only second")
        loader = FileSystemLoader([first, second])
        assert loader.get_source("x.txt")[0] == "first"
        assert loader.get_source("y.txt")[0] == "only second"

    def test_not_found(self, tmp_path):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            FileSystemLoader(tmp_path).get_source("missing.txt")
        assert "missing.txt" in str(exc_info.value)

    def test_undecodable_is_load_error(self, tmp_path):
        (tmp_path / "bad.txt").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(TemplateLoadError) as exc_info:
            FileSystemLoader(tmp_path).get_source("bad.txt")
        assert not isinstance(exc_info.value, TemplateNotFoundError)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_list_templates(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.txt").write_text("")
        (tmp_path / "sub" / "b.html").write_text("")
        assert FileSystemLoader(tmp_path).list_templates() == ["a.txt", "sub/b.html"]


class TestDictLoader:
    def test_get_source(self):
        assert DictLoader({"a.txt": "x"}).get_source("a.txt") == ("x", None)

    def test_suggestion(self):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            DictLoader({"quick-start.txt": ""}).get_source("quick-strat.txt")
        assert "Did you mean 'quick-start.txt'?" in str(exc_info.value)

    def test_lists_available(self):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            DictLoader({"a.txt": "", "b.txt": ""}).get_source("zzzzzzzz.html")
        assert "Available: a.txt, b.txt" in str(exc_info.value)


class TestChoiceLoader:
    def test_first_match_wins(self):
        loader = ChoiceLoader([DictLoader({"a": "1"}), DictLoader({"a": "2", "b": "3"})])
        assert loader.get_source("a")[0] == "1"
        assert loader.get_source("b")[0] == "3"
        assert loader.list_templates() == ["a", "b"]

    def test_not_found(self):
        with pytest.raises(TemplateNotFoundError):
            ChoiceLoader([DictLoader({})]).get_source("a")

    def test_load_error_stops_search(self, tmp_path):
        (tmp_path / "bad.txt").write_bytes(b"\xff")
        loader = ChoiceLoader([FileSystemLoader(tmp_path), DictLoader({"bad.txt": "ok"})])
        with pytest.raises(TemplateLoadError):
            loader.get_source("bad.txt")


class TestEnvironment:
    def test_get_template(self, env_with_loader, ctx):
        template = env_with_loader.get_template("greeting.txt")
        assert template.render(ctx(name="Ann")) == "Hello, Ann!\n"
        assert template.name == "greeting.txt"
        assert template.escape is False

    def test_get_template_html_escapes(self, env_with_loader, ctx):
        template = env_with_loader.get_template("page.html")
        assert template.escape is True
        assert template.render(ctx(title="a<b")) == "<h1>a&lt;b</h1>\n"

    def test_get_source(self, env_with_loader):
        source = env_with_loader.get_source("list.txt")
        assert source.content_type == "text/plain; charset=utf-8"
        assert source.filename is None

    def test_no_loader(self, env):
        with pytest.raises(TemplateNotFoundError):
            env.get_template("x.txt")

    def test_namespace(self, env):
        template = env.from_string("{{ answer }}", namespace={"answer": 42})
        assert template.render(None) == "42"

    def test_builtins_available_by_default(self, env):
        assert env.from_string("{{ len(self) }}").render("abc") == "3"

    def test_invalid_marker(self):
        with pytest.raises(ValueError):
            Environment(directive_marker="")

    def test_repr(self, env_with_loader):
        assert "DictLoader" in repr(env_with_loader)
