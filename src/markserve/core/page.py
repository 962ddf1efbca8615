"""HTML page composition.

Wraps rendered markdown in the site's fixed page shell. The title is escaped
by jinja2's autoescaping; the content fragment is marked safe and inserted
verbatim.
"""

from jinja2 import Environment, PackageLoader, Template, select_autoescape
from markupsafe import Markup

PAGE_TEMPLATE = "page.html"


class PageComposer:
    """Composes complete HTML documents from a title and an HTML fragment."""

    def __init__(self, environment: Environment | None = None) -> None:
        """Initialize composer.

        Args:
            environment: jinja2 environment providing page.html.
                         Defaults to the templates bundled with markserve.
        """
        if environment is None:
            environment = Environment(
                loader=PackageLoader("markserve", "templates"),
                autoescape=select_autoescape(),
            )
        self._environment = environment
        self._template: Template | None = None

    def compose(self, title: str, content: str) -> str:
        """Render the page shell.

        Args:
            title: Page title, HTML-escaped on output
            content: Rendered HTML fragment, inserted unescaped

        Returns:
            Complete HTML document

        Raises:
            jinja2.TemplateError: If the page template cannot be loaded or rendered
        """
        if self._template is None:
            self._template = self._environment.get_template(PAGE_TEMPLATE)
        return self._template.render(title=title, content=Markup(content))
