"""Markup tokenizer producing text fragments for selected elements.

Text inside a selected element is reported as one or more fragments per
text node; a text node ends at any tag or comment, which is signalled by an
empty fragment with ``last_in_node`` set.
"""

from collections.abc import Iterable, Iterator
from html.parser import HTMLParser

from ynab_sync.models import TextFragment

DEFAULT_BLOCK_SIZE = 4096


class FragmentTokenizer(HTMLParser):
    """HTMLParser that records text fragments inside the given elements."""

    def __init__(self, tag_names: Iterable[str]):
        super().__init__(convert_charrefs=True)
        self.tag_names = {name.lower() for name in tag_names}
        self._depth = 0
        self._in_text_node = False
        self._fragments: list[TextFragment] = []

    def _end_text_node(self) -> None:
        if self._in_text_node:
            self._fragments.append(TextFragment(content="", last_in_node=True))
            self._in_text_node = False

    def handle_starttag(self, tag, attrs):
        self._end_text_node()
        if tag in self.tag_names:
            self._depth += 1

    def handle_endtag(self, tag):
        self._end_text_node()
        if tag in self.tag_names and self._depth:
            self._depth -= 1

    def handle_comment(self, data):
        self._end_text_node()

    def handle_data(self, data):
        if self._depth and data:
            self._fragments.append(TextFragment(content=data))
            self._in_text_node = True

    def close(self) -> None:
        super().close()
        self._end_text_node()

    def drain(self) -> list[TextFragment]:
        """Take the fragments produced since the last drain."""
        fragments, self._fragments = self._fragments, []
        return fragments


def tokenize(
    markup: str,
    tag_names: Iterable[str],
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> Iterator[TextFragment]:
    """Stream the text fragments of the selected elements in document order.

    Args:
        markup: HTML document
        tag_names: Element names whose text is reported (e.g. ["td"])
        block_size: Characters fed to the parser at a time

    Yields:
        Text fragments, each text node terminated by a last_in_node fragment
    """
    parser = FragmentTokenizer(tag_names)
    for start in range(0, len(markup), block_size):
        parser.feed(markup[start : start + block_size])
        yield from parser.drain()
    parser.close()
    yield from parser.drain()
