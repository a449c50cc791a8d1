# docmarkup/markdown/postprocessors/outer_paragraph.py

from bs4 import BeautifulSoup, NavigableString, Tag


def strip_outer_paragraph(html: str, context: dict) -> str:
    """
    Unwrap a result that is exactly one bare <p> element.

    Short descriptions are placed inside the page's own paragraphs, so the
    renderer's wrapper would nest them. Anything with more than one top-level
    element is returned unchanged.
    """
    soup = BeautifulSoup(html, "html.parser")
    children = [
        c
        for c in soup.contents
        if not (isinstance(c, NavigableString) and not c.strip())
    ]
    if len(children) != 1:
        return html

    node = children[0]
    if isinstance(node, Tag) and node.name == "p" and not node.attrs:
        return node.decode_contents()
    return html
