from typing import Any, Optional

from werkzeug.exceptions import Forbidden, HTTPException, InternalServerError, NotFound


class PlainTextError(HTTPException):
    """
    Mixin that renders an HTTP error as a short plain-text body instead of
    Werkzeug's default HTML page.
    """

    def get_body(self, environ: Optional[Any] = None, scope: Optional[dict] = None) -> str:
        return f"{self.description}\n"

    def get_headers(self, environ: Optional[Any] = None, scope: Optional[dict] = None) -> list:
        return [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
        ]


class DocumentNotFound(PlainTextError, NotFound):
    description = "404 page not found"


class DocumentForbidden(PlainTextError, Forbidden):
    description = "forbidden"


class DocumentReadError(PlainTextError, InternalServerError):
    """
    Raised for any failure opening, stating or reading a resolved file that is
    not a "does not exist" condition.
    :param action: the failing step, e.g. "opening", "stating", "reading".
    :param path: the request-relative path of the file.
    :param cause: the underlying exception.
    """

    def __init__(self, action: str, path: str, cause: BaseException):
        self.action = action
        self.path = path
        self.cause = cause
        super().__init__(description=f'error {action} "{path}": {cause}')
