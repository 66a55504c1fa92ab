"""
Front matter: an optional block of `Key: Value` lines at the top of a
Markdown file, terminated by a blank line.

    Created: 2024-01-02
    Title: Example Page

    ## Your Markdown Here

Keys are looked up case-insensitively. A file that does not start with a
well-formed block is served as-is, with no metadata.
"""

import re
import logging
from typing import BinaryIO, List, Tuple

from werkzeug.datastructures import Headers

logger = logging.getLogger(__name__)

# HTTP token characters, as accepted by MIME header readers
_KEY_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

TITLE_KEY = "Title"
_TITLE_SEPARATORS = str.maketrans({"_": " ", "-": " ", ".": " "})


class HeaderFormatError(ValueError):
    """The stream does not start with a well-formed header block."""


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HeaderFormatError(f"header is not valid utf-8: {e}")


def read_header_block(stream: BinaryIO) -> Headers:
    """
    Read `Key: Value` lines up to and including the first blank line.
    Lines starting with a space or tab continue the previous value.
    Raises HeaderFormatError on anything that is not a header block; OSError
    from the stream is left to propagate.
    """
    pairs: List[List[str]] = []

    while True:
        raw = stream.readline()
        if not raw:
            raise HeaderFormatError("end of file before blank line")

        line = raw.rstrip(b"\r\n")
        if not line:
            break

        if line[:1] in (b" ", b"\t"):
            if not pairs:
                raise HeaderFormatError(f"unexpected continuation line: {line!r}")
            pairs[-1][1] = f"{pairs[-1][1]} {_decode(line).strip()}".strip()
            continue

        key, sep, value = line.partition(b":")
        if not sep:
            raise HeaderFormatError(f"malformed header line: {line!r}")
        key_text = _decode(key)
        if not _KEY_RE.match(key_text):
            raise HeaderFormatError(f"malformed header key: {key_text!r}")
        pairs.append([key_text, _decode(value).strip()])

    if not pairs:
        raise HeaderFormatError("empty header block")

    return Headers([(key, value) for key, value in pairs])


def parse_front_matter(stream: BinaryIO) -> Tuple[Headers, bytes]:
    """
    Split a seekable byte stream into (metadata, content).
    Without a header block the whole stream, read again from offset 0, is the
    content and the metadata is empty.
    """
    try:
        metadata = read_header_block(stream)
    except HeaderFormatError as e:
        logger.debug(f"No front matter: {e}")
        stream.seek(0)
        return Headers(), stream.read()

    return metadata, stream.read()


def title_from_filename(name: str) -> str:
    """'getting_started-guide.md' -> 'Getting Started Guide'"""
    if name.lower().endswith(".md"):
        name = name[:-3]
    words = name.translate(_TITLE_SEPARATORS).split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def derive_title(filename: str, metadata: Headers) -> str:
    title = metadata.get(TITLE_KEY, "")
    if title:
        return title
    return title_from_filename(filename).strip() or filename
