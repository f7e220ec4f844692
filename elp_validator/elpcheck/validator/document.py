"""Manifest parsing with lxml.

Tag lookups match local names so that manifests declaring a default
namespace (``xmlns="http://www.intef.es/xsd/ode"``) behave like bare ones.
"""

from __future__ import annotations

from typing import Any, Iterator

from lxml import etree

from elpcheck.errors import MalformedDocument


def _make_parser() -> etree.XMLParser:
    # Entity expansion and DTD/network fetching stay off for untrusted uploads.
    return etree.XMLParser(
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
        remove_comments=False,
    )


def local_name(element: Any) -> str:
    """Tag name of ``element`` without its namespace, or ``""`` for non-elements."""
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def descendants(element: Any, tag: str) -> Iterator[Any]:
    """Yield every element below ``element`` whose local name is ``tag``."""
    for node in element.iterdescendants():
        if local_name(node) == tag:
            yield node


def first_descendant(element: Any, tag: str) -> Any | None:
    return next(descendants(element, tag), None)


def text_of(element: Any | None) -> str:
    """All text contained in ``element``, CDATA included."""
    if element is None:
        return ""
    return "".join(element.itertext())


class ManifestDocument:
    """A parsed manifest. Never mutated after :func:`parse_manifest`."""

    def __init__(self, root: Any) -> None:
        self._root = root

    @property
    def root(self) -> Any:
        return self._root

    @property
    def root_tag(self) -> str:
        return local_name(self._root)

    def find_all(self, tag: str) -> list[Any]:
        """All elements named ``tag`` in document order, the root included."""
        found = [self._root] if local_name(self._root) == tag else []
        found.extend(descendants(self._root, tag))
        return found

    def count(self, tag: str) -> int:
        return len(self.find_all(tag))


def parse_manifest(text: str) -> ManifestDocument:
    """Parse manifest XML text.

    Raises MalformedDocument with the parser's own diagnostic when the text
    is not a well-formed XML document.
    """
    if not isinstance(text, str):
        raise MalformedDocument("The provided XML payload is not a string.")
    if not text.strip():
        raise MalformedDocument("The XML document is empty.")

    try:
        root = etree.fromstring(text.encode("utf-8"), _make_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedDocument(str(e) or "The XML document is not well-formed.") from e

    return ManifestDocument(root)
