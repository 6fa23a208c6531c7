"""Tests for the errors example."""

from kiln import ErrorCode


class TestErrorsApp:
    """Verify errors name the template line that caused them."""

    def test_unclosed_block(self, example_app) -> None:
        error = example_app.unclosed
        assert error.code is ErrorCode.UNBALANCED_BLOCK
        assert error.lineno == 2
        assert "if self.admin" in str(error)

    def test_stray_closer(self, example_app) -> None:
        error = example_app.stray
        assert error.code is ErrorCode.UNMATCHED_CLOSER
        assert error.lineno == 1

    def test_render_error_line(self, example_app) -> None:
        error = example_app.nested
        assert error.template_name == "Badge"
        assert error.lineno == 2
        assert isinstance(error.__cause__, AttributeError)

    def test_render_error_template_stack(self, example_app) -> None:
        assert example_app.nested.template_stack == [("HeaderHtml", 2)]

    def test_compact_format_has_docs(self, example_app) -> None:
        text = example_app.nested.format_compact()
        assert "KLN-RUN-001" in text
        assert "Badge:2" in text
