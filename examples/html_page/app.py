"""HTML pages -- escaping decided by the template suffix.

``PageHtml`` renders ``templates/page.html``. Because the suffix is
``.html`` every interpolated value is escaped, except values that provide
``__html__``: ``Markup`` strings and other HTML contexts, such as the
``NavHtml`` instance interpolated inside the page.

Run:
    python app.py
"""

from kiln import Markup, display


NAV_TEMPLATE = (
    "<nav>\n"
    "%% for url, label in self.links {\n"
    '  <a href="{{ url }}">{{ label }}</a>\n'
    "%% }\n"
    "</nav>"
)


@display(text=NAV_TEMPLATE, suffix="html")
class NavHtml:
    def __init__(self, links: list[tuple[str, str]]):
        self.links = links


@display
class PageHtml:
    def __init__(self, title: str, body: str, nav: NavHtml):
        self.title = title
        self.body = body
        self.nav = nav
        self.footer = Markup("<small>Built with kiln</small>")


nav = NavHtml([("/", "Home"), ("/about?a=1&b=2", "About")])
page = PageHtml("Tom & Jerry", "<script>alert('hi')</script>", nav)
output = str(page)


def main() -> None:
    print(output, end="")


if __name__ == "__main__":
    main()
