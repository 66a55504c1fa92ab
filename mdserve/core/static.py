import logging
import mimetypes
from typing import List
from urllib.parse import quote

from markupsafe import escape
from werkzeug.exceptions import HTTPException
from werkzeug.utils import redirect, send_file
from werkzeug.wrappers import Request, Response

from .errors import DocumentNotFound, DocumentReadError
from .filesystem import FileInfo, FileSystem
from .resolver import strip_prefix

logger = logging.getLogger(__name__)

INDEX_HTML = "index.html"


def render_listing(entries: List[FileInfo]) -> str:
    """Minimal HTML directory listing, directories marked with a trailing slash."""
    lines = ['<pre>']
    for info in entries:
        name = info.name + ("/" if info.is_dir else "")
        lines.append(f'<a href="{escape(quote(name))}">{escape(name)}</a>')
    lines.append('</pre>')
    return "\n".join(lines) + "\n"


class StaticFileHandler:
    """
    Serves the filesystem unmodified: files as-is, directories as their
    index.html or as a listing. Used for everything the Markdown handler
    does not render itself.
    """

    def __init__(self, fs: FileSystem, prefix: str = ""):
        self.fs = fs
        self.prefix = prefix

    def _serve_file(self, request: Request, info: FileInfo, stream) -> Response:
        mimetype = mimetypes.guess_type(info.name)[0] or "application/octet-stream"
        return send_file(
            stream,
            request.environ,
            mimetype=mimetype,
            last_modified=info.mod_time,
            conditional=True,
        )

    def serve(self, request: Request) -> Response:
        name = strip_prefix(request.path, self.prefix)
        try:
            return self._serve(request, name)
        except HTTPException as e:
            return e.get_response(request.environ)

    def _serve(self, request: Request, name: str) -> Response:
        try:
            handle = self.fs.open(name)
        except FileNotFoundError:
            raise DocumentNotFound()
        except OSError as e:
            logger.error(f"Static: failed to open {name!r}: {e}")
            raise DocumentReadError("opening", name, e)

        try:
            info = handle.stat()
        except OSError as e:
            handle.close()
            raise DocumentReadError("stating", name, e)

        if not info.is_dir:
            # the response closes the stream once it has been sent
            logger.debug(f"Static: serving file {name!r}")
            return self._serve_file(request, info, handle.stream)

        handle.close()
        if not request.path.endswith("/"):
            return redirect(request.path + "/", code=301)

        index_name = name.rstrip("/") + "/" + INDEX_HTML
        index = None
        try:
            index = self.fs.open(index_name)
            index_info = index.stat()
        except OSError:
            if index is not None:
                index.close()
            index = None
        if index is not None:
            if not index_info.is_dir:
                return self._serve_file(request, index_info, index.stream)
            index.close()

        try:
            entries = self.fs.listdir(name)
        except OSError as e:
            logger.error(f"Static: failed to list {name!r}: {e}")
            raise DocumentReadError("reading directory", name, e)

        logger.debug(f"Static: listing {name!r} ({len(entries)} entries)")
        return Response(render_listing(entries), mimetype="text/html")
