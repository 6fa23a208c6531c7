"""Error reporting -- compile errors and render errors point at template lines.

Compile errors are raised when ``@display`` runs (at import time);
render errors are raised by ``str()`` and carry the template line of the
failing expression plus the chain of templates that interpolated it.

Run:
    FORCE_COLOR=1 python app.py
"""

from kiln import Environment, TemplateRuntimeError, TemplateSyntaxError, display

env = Environment()

try:
    env.from_string("Hello\n%% if self.admin {\nWelcome back\n", name="admin.txt")
except TemplateSyntaxError as e:
    unclosed = e


try:
    env.from_string("%% } else {\nNo\n", name="stray.txt")
except TemplateSyntaxError as e:
    stray = e


@display(text="Signed in as\n  {{ self.user.name.upper() }}\n")
class Badge:
    def __init__(self, user):
        self.user = user


@display(text="<header>\n{{ self.badge }}\n</header>\n", suffix="html")
class HeaderHtml:
    def __init__(self, badge: Badge):
        self.badge = badge


try:
    str(HeaderHtml(Badge(None)))
except TemplateRuntimeError as e:
    nested = e


def main() -> None:
    for error in (unclosed, stray, nested):
        print(error.format_compact())
        print()


if __name__ == "__main__":
    main()
