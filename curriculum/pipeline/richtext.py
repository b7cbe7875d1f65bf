from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag


BOLD_TAGS = {"b", "strong"}
BLOCK_TAGS = {"div", "p"}


@dataclass(frozen=True)
class Segment:
    text: str
    bold: bool = False


@dataclass(frozen=True)
class LogicalLine:
    text: str
    bold: bool = False

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


def parse_segments(markup: str) -> List[Segment]:
    """
    Parse editor markup into weight-tagged segments.

    <b>/<strong> mark bold, <br> is a line break, <div>/<p> and the markup
    as a whole open and close a line. Adjacent segments of the same weight are merged.
    """
    if not markup:
        return []

    soup = BeautifulSoup(markup, "html.parser")
    segments: List[Segment] = []

    def ends_with_break() -> bool:
        return bool(segments) and segments[-1].text.endswith("\n")

    def walk(node, bold: bool) -> None:
        if isinstance(node, Comment):
            return
        if isinstance(node, NavigableString):
            text = str(node)
            if text:
                segments.append(Segment(text, bold))
            return
        if not isinstance(node, Tag):
            return

        tag = (node.name or "").lower()
        if tag == "br":
            segments.append(Segment("\n", False))
            return

        is_bold = bold or tag in BOLD_TAGS
        if tag in BLOCK_TAGS and segments and not ends_with_break():
            segments.append(Segment("\n", False))
        for child in node.children:
            walk(child, is_bold)
        if tag in BLOCK_TAGS and segments and not ends_with_break():
            segments.append(Segment("\n", False))

    # the markup root closes its line like a block element
    for child in soup.children:
        walk(child, False)
    if segments and not ends_with_break():
        segments.append(Segment("\n", False))

    merged: List[Segment] = []
    for seg in segments:
        if merged and merged[-1].bold == seg.bold:
            merged[-1] = Segment(merged[-1].text + seg.text, seg.bold)
        else:
            merged.append(seg)
    return merged


def flatten(segments: List[Segment]) -> Tuple[str, List[Tuple[int, int]]]:
    text = ""
    bold_ranges: List[Tuple[int, int]] = []
    for seg in segments:
        if seg.bold:
            bold_ranges.append((len(text), len(text) + len(seg.text)))
        text += seg.text
    return text, bold_ranges


def logical_lines(markup: str) -> List[LogicalLine]:
    """Split flattened text on newlines; a line is bold if any bold range touches it."""
    text, bold_ranges = flatten(parse_segments(markup))
    if not text:
        return []

    lines: List[LogicalLine] = []
    pos = 0
    for raw in text.split("\n"):
        start, end = pos, pos + len(raw)
        pos = end + 1
        bold = any(r_start < end and r_end > start for r_start, r_end in bold_ranges)
        lines.append(LogicalLine(raw, bold))
    return lines
