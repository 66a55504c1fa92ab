from typing import Optional, Tuple
import markdown
import logging

from .sanitizer import Policy, ugc_policy

logger = logging.getLogger(__name__)

TOC_SPLIT_AT = "</nav>"

# Applied in order; no replacement produces text an earlier one would match.
TOC_REPLACEMENTS = (
    ("<nav>", ""),
    ("<ul>", '<ul class="nav flex-column">'),
    ("<li>", '<li class="nav-item">'),
    ("<a ", '<a class="nav-link" '),
)

DEFAULT_HIGHLIGHT_STYLE = "default"


class MarkdownConverter:
    """
    Markdown -> HTML. With `toc=True` and at least one heading, the output
    starts with the table of contents wrapped in <nav>...</nav>, followed by
    a newline and the document body.
    """

    def __init__(self, highlight_style: str = DEFAULT_HIGHLIGHT_STYLE):
        self.highlight_style = highlight_style

    def _markdown(self) -> markdown.Markdown:
        # Markdown instances keep per-document state; build one per conversion.
        return markdown.Markdown(
            extensions=[
                'tables',
                'def_list',
                'sane_lists',
                'toc',
                'pymdownx.superfences',
                'pymdownx.highlight',
                'pymdownx.tilde',
                'pymdownx.magiclink',
            ],
            extension_configs={
                "pymdownx.highlight": {
                    # inline style="" on spans, no external stylesheet needed
                    "noclasses": True,
                    "pygments_style": self.highlight_style,
                    "guess_lang": False,
                },
            }
        )

    def convert(self, text: str, toc: bool = True) -> str:
        md_instance = self._markdown()
        body = md_instance.convert(text)

        if not toc or not getattr(md_instance, "toc_tokens", None):
            return body

        toc_html = md_instance.toc
        start = toc_html.find("<ul>")
        end = toc_html.rfind("</ul>")
        if start < 0 or end < 0:
            return body

        toc_list = toc_html[start:end + len("</ul>")]
        return f"<nav>\n{toc_list}\n{TOC_SPLIT_AT}\n{body}"


def rewrite_toc(toc: str) -> str:
    """Drop the <nav> wrapper and add navigation classes to the TOC list."""
    for old, new in TOC_REPLACEMENTS:
        toc = toc.replace(old, new)
    return toc


def build_policy() -> Policy:
    """UGC policy plus inline styles on <span>, which carry the code highlighting."""
    policy = ugc_policy()
    policy.allow_elements("span")
    policy.allow_attrs("style", on_elements=["span"], matching=r"^[a-zA-Z0-9\s:;#%.,\-]*$")
    return policy


class RenderPipeline:
    """
    content bytes -> (toc, body).

    The body is sanitized. The TOC is markup generated from the document's
    headings and is returned without sanitization.
    """

    def __init__(self, converter: Optional[MarkdownConverter] = None, policy: Optional[Policy] = None):
        self.converter = converter or MarkdownConverter()
        self.policy = policy or build_policy()

    def split(self, raw: str) -> Tuple[str, str]:
        i = raw.find(TOC_SPLIT_AT)
        if i < 0:
            return "", self.policy.sanitize(raw)

        toc = rewrite_toc(raw[:i])
        body = self.policy.sanitize(raw[i + len(TOC_SPLIT_AT) + 1:])
        return toc, body

    def __call__(self, content: bytes) -> Tuple[str, str]:
        text = content.decode("utf-8", errors="replace")
        logger.debug(f"Render: {len(content)} bytes input")
        raw = self.converter.convert(text, toc=True)
        return self.split(raw)


render_markdown = RenderPipeline()
