from abc import ABC, abstractmethod
from typing import Any, Iterator
import logging

from jinja2 import Environment, select_autoescape
from werkzeug.wrappers import Request, Response

from .template import HTML_TEMPLATE

logger = logging.getLogger(__name__)


class DocumentRenderer(ABC):
    """
    Abstract Base Class for render callbacks.
    A renderer receives the request and the fully loaded MarkdownFile and is
    solely responsible for producing the response. Plain callables with the
    same signature are accepted wherever a DocumentRenderer is.
    """

    @abstractmethod
    def render(self, request: Request, document: Any) -> Response:
        """
        Build the response for `document`.
        :param request: The incoming request.
        :param document: The MarkdownFile; `body`/`toc` render on first access.
        """
        pass

    def __call__(self, request: Request, document: Any) -> Response:
        return self.render(request, document)


class DefaultRenderer(DocumentRenderer):
    """
    Streams `template_source` (Jinja2, autoescaped) with `doc` bound to the
    document. The 200 status and headers go out before the template runs, so
    a template failure is logged and ends the body early; it cannot change
    the status any more.
    """

    def __init__(self, template_source: str = HTML_TEMPLATE):
        self.environment = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
        self.template = self.environment.from_string(template_source)

    def _generate(self, document: Any) -> Iterator[str]:
        try:
            yield from self.template.generate(doc=document)
        except Exception as e:
            logger.error(f"error executing template for {getattr(document, 'path', document)!r}: {e}", exc_info=True)

    def render(self, request: Request, document: Any) -> Response:
        return Response(self._generate(document), status=200, mimetype="text/html")


default_renderer = DefaultRenderer()
