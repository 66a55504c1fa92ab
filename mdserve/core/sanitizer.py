"""
Allowlist HTML sanitizer built on BeautifulSoup.

A Policy lists the elements and attributes that may survive. Elements that
are not allowed are unwrapped (their children are kept), except for elements
whose content is itself executable or invisible, which are dropped whole.
"""

import re
import logging
from typing import Dict, Iterable, Optional, Pattern, Set
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction, Tag

logger = logging.getLogger(__name__)

# Removed together with everything inside them
DROP_CONTENT_ELEMENTS = {
    "script", "style", "iframe", "frame", "frameset", "object", "embed",
    "applet", "noscript", "template", "textarea", "select", "title", "head",
}

URL_ATTRIBUTES = {"href", "src", "cite", "longdesc"}

_STRIPPED_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
_URL_JUNK_RE = re.compile(r"[\x00-\x20\x7f]+")


class Policy:
    """
    Sanitization policy. Builder methods return the policy so calls can be
    chained:

        policy = ugc_policy().allow_attrs("style", on_elements=["span"])
    """

    def __init__(self):
        self.elements: Set[str] = set()
        self.element_attrs: Dict[str, Dict[str, Optional[Pattern]]] = {}
        self.global_attrs: Dict[str, Optional[Pattern]] = {}
        self.url_schemes: Set[str] = set()
        self.nofollow_links = False

    def allow_elements(self, *names: str) -> "Policy":
        self.elements.update(name.lower() for name in names)
        return self

    def allow_attrs(self, *attrs: str, on_elements: Iterable[str] = (), matching: Optional[str] = None) -> "Policy":
        """
        Allow `attrs` on the given elements (which are allowed as well), or on
        every allowed element when `on_elements` is empty. When `matching` is
        given the whole attribute value must match it.
        """
        pattern = re.compile(matching) if matching else None
        elements = [name.lower() for name in on_elements]
        for attr in attrs:
            attr = attr.lower()
            if not elements:
                self.global_attrs[attr] = pattern
                continue
            for element in elements:
                self.element_attrs.setdefault(element, {})[attr] = pattern
        self.allow_elements(*elements)
        return self

    def allow_url_schemes(self, *schemes: str) -> "Policy":
        self.url_schemes.update(scheme.lower() for scheme in schemes)
        return self

    def require_nofollow_on_links(self) -> "Policy":
        self.nofollow_links = True
        return self

    def _attr_pattern(self, element: str, attr: str):
        """Return (allowed, pattern) for an attribute of an element."""
        per_element = self.element_attrs.get(element, {})
        if attr in per_element:
            return True, per_element[attr]
        if attr in self.global_attrs:
            return True, self.global_attrs[attr]
        return False, None

    def _url_allowed(self, value: str) -> bool:
        value = _URL_JUNK_RE.sub("", value)
        try:
            scheme = urlsplit(value).scheme
        except ValueError:
            return False
        return not scheme or scheme.lower() in self.url_schemes

    def _clean_attrs(self, tag: Tag) -> None:
        for attr in list(tag.attrs):
            value = tag.attrs[attr]
            text = " ".join(value) if isinstance(value, list) else str(value)
            allowed, pattern = self._attr_pattern(tag.name, attr.lower())
            if not allowed:
                del tag.attrs[attr]
            elif pattern is not None and not pattern.match(text):
                del tag.attrs[attr]
            elif attr.lower() in URL_ATTRIBUTES and not self._url_allowed(text):
                logger.debug(f"Dropping unsafe {attr} on <{tag.name}>: {text!r}")
                del tag.attrs[attr]

        if self.nofollow_links and tag.name == "a" and tag.has_attr("href"):
            tag["rel"] = "nofollow"

    def sanitize(self, html: str) -> str:
        """Return `html` with everything outside the policy removed."""
        soup = BeautifulSoup(html, "html.parser")

        for node in soup.find_all(string=lambda s: isinstance(s, _STRIPPED_NODES)):
            node.extract()

        for tag in soup.find_all(True):
            if tag.decomposed:
                continue
            name = tag.name.lower()
            if name in DROP_CONTENT_ELEMENTS:
                tag.decompose()
            elif name not in self.elements:
                tag.unwrap()
            else:
                self._clean_attrs(tag)
                # an <input> that lost its type would render as a text field
                if name == "input" and not tag.has_attr("type"):
                    tag.decompose()

        return str(soup)


def ugc_policy() -> Policy:
    """
    Baseline policy for user generated content: text formatting, headings,
    lists, tables, code, images and links. No styles, classes or scripts.
    """
    policy = Policy()
    policy.allow_url_schemes("http", "https", "mailto")
    policy.require_nofollow_on_links()

    policy.allow_attrs("dir", matching=r"^(?i:rtl|ltr)$")
    policy.allow_attrs("lang", matching=r"^[a-zA-Z]{2,20}(-[a-zA-Z0-9]{1,8})*$")
    policy.allow_attrs("id", matching=r"^[a-zA-Z0-9\:\-_\.]+$")
    policy.allow_attrs("title")

    policy.allow_elements(
        "abbr", "acronym", "b", "bdi", "bdo", "br", "cite", "code", "dfn",
        "div", "em", "i", "kbd", "mark", "p", "pre", "rp", "rt", "ruby", "s",
        "samp", "small", "span", "strike", "strong", "sub", "summary", "sup",
        "tt", "u", "var", "wbr", "hr", "figure", "figcaption",
        "h1", "h2", "h3", "h4", "h5", "h6",
        "dl", "dt", "dd", "ul", "li",
        "caption", "colgroup", "thead", "tbody", "tfoot",
    )

    policy.allow_attrs("href", on_elements=["a"])
    policy.allow_attrs("cite", on_elements=["blockquote", "del", "ins", "q"])
    policy.allow_attrs("datetime", on_elements=["del", "ins", "time"])
    policy.allow_attrs("open", on_elements=["details"])
    policy.allow_attrs("type", on_elements=["ol", "ul"], matching=r"^[a-zA-Z0-9]+$")
    policy.allow_attrs("start", "reversed", on_elements=["ol"])
    policy.allow_attrs("value", on_elements=["li"], matching=r"^[0-9]+$")
    policy.allow_attrs("class", on_elements=["code"], matching=r"^language-[a-zA-Z0-9_+#-]+$")

    policy.allow_attrs("src", "alt", on_elements=["img"])
    policy.allow_attrs("width", "height", on_elements=["img"], matching=r"^[0-9]+%?$")

    policy.allow_attrs("summary", on_elements=["table"])
    policy.allow_attrs("span", on_elements=["col", "colgroup"], matching=r"^[0-9]+$")
    policy.allow_attrs("align", on_elements=["col", "colgroup", "img", "td", "th", "tr", "tbody", "thead", "tfoot"],
                       matching=r"^(?i:center|justify|left|right)$")
    policy.allow_attrs("colspan", "rowspan", on_elements=["td", "th"], matching=r"^[0-9]+$")
    policy.allow_attrs("headers", on_elements=["td", "th"])
    policy.allow_attrs("scope", on_elements=["th"], matching=r"^(?i:row|col|rowgroup|colgroup)$")
    policy.allow_elements("table", "tr", "td", "th")

    # Task lists
    policy.allow_attrs("type", on_elements=["input"], matching=r"^(?i:checkbox)$")
    policy.allow_attrs("checked", "disabled", on_elements=["input"])

    return policy
