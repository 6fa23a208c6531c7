"""Tests for the hello example."""


class TestHelloApp:
    """Verify the hello example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "Hello, World!\n"

    def test_rerender_with_different_context(self, example_app) -> None:
        assert str(example_app.Greeting("Kiln")) == "Hello, Kiln!\n"

    def test_content_type(self, example_app) -> None:
        assert example_app.Greeting.content_type == "text/plain; charset=utf-8"
