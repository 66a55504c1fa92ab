import logging
from typing import Any, Callable, Iterable, Optional

from werkzeug.exceptions import HTTPException
from werkzeug.wrappers import Request, Response

from .document import MarkdownFile, RenderFunc
from .errors import DocumentReadError
from .filesystem import FileSystem
from .render_interface import default_renderer
from .renderer import render_markdown
from .resolver import FileResolver, is_markdown_path, strip_prefix
from .static import StaticFileHandler

logger = logging.getLogger(__name__)

RendererFunc = Callable[[Request, MarkdownFile], Response]
WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


class MarkdownHandler:
    """
    Renders Markdown files from `fs` for request paths under `prefix`.

    Only `.md` files are rendered; other files requested directly get a 403.
    A directory is served as its index.md when it has one and otherwise
    handed, with the original request, to the static file server.

    :param prefix: URL path prefix stripped before looking up files, e.g. "/docs/".
    :param fs: The FileSystem to serve from.
    :param renderer: Optional render callback (request, document) -> Response.
                     Defaults to the HTML page template.
    :param pipeline: Optional content -> (toc, body) function used by documents.
    """

    def __init__(self, prefix: str, fs: FileSystem, renderer: Optional[RendererFunc] = None,
                 pipeline: Optional[RenderFunc] = None):
        self.prefix = prefix
        self.fs = fs
        self.renderer = renderer
        self.pipeline = pipeline or render_markdown
        self.resolver = FileResolver(fs)
        self.fallback = StaticFileHandler(fs, prefix)

    def path(self, request: Request) -> str:
        return strip_prefix(request.path, self.prefix)

    def load(self, request: Request) -> Optional[MarkdownFile]:
        """
        Resolve and parse the document for `request`.
        Returns None when the request belongs to the static file server.
        Raises the HTTP errors of the resolver and DocumentReadError.
        """
        resolved = self.resolver.resolve(self.path(request))
        if resolved is None:
            return None

        with resolved:
            try:
                return MarkdownFile.load(resolved.path, resolved.info, resolved.handle.stream,
                                         render=self.pipeline)
            except OSError as e:
                logger.error(f"Failed to read {resolved.path!r}: {e}")
                raise DocumentReadError("reading", resolved.path, e)

    def serve(self, request: Request) -> Response:
        try:
            document = self.load(request)
        except HTTPException as e:
            return e.get_response(request.environ)

        if document is None:
            logger.debug(f"Delegating {request.path!r} to static file server")
            return self.fallback.serve(request)

        logger.info(f"Serving {document.path!r} as {document.title!r}")
        renderer = self.renderer or default_renderer
        return renderer(request, document)

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        response = self.serve(Request(environ))
        return response(environ, start_response)

    def register(self, app: WSGIApp) -> "MarkdownMiddleware":
        """Wrap `app` so that only `.md` paths are handled here."""
        return MarkdownMiddleware(app, self)


class MarkdownMiddleware:
    """
    WSGI middleware rendering `.md` paths and passing every other request
    through to the wrapped application untouched. Markdown requests do not
    reach the wrapped application, so put this outermost.
    """

    def __init__(self, app: WSGIApp, handler: MarkdownHandler):
        self.app = app
        self.handler = handler

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        if is_markdown_path(environ.get("PATH_INFO", "")):
            return self.handler(environ, start_response)
        return self.app(environ, start_response)


def new_middleware(prefix: str, fs: FileSystem, renderer: Optional[RendererFunc] = None,
                   pipeline: Optional[RenderFunc] = None) -> Callable[[Any], MarkdownMiddleware]:
    """
    Like MarkdownHandler, but returns a decorator wrapping another WSGI app;
    non-Markdown paths fall through to that app.
    """
    return MarkdownHandler(prefix, fs, renderer=renderer, pipeline=pipeline).register
