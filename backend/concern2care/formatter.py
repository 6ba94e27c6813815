"""Structure intervention text into display blocks.

Intervention strategies come back from the LLM as a small markdown subset:
``### `` headings, lines wrapped in ``**`` used as subheadings, ``* `` bullets,
inline ``**bold**`` runs and blank lines between paragraphs. ``format_content``
maps every input line to exactly one typed block; turning those blocks into
HTML or plain text is left to :mod:`concern2care.rendering`.
"""
from __future__ import annotations
import re
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


BOLD_MARKER = "**"
HEADING_PREFIX = "### "
BULLET_PREFIX = "* "

# Whitespace and the byte-order mark
_EDGE_WHITESPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


class _Frozen(BaseModel):
	model_config = ConfigDict(frozen=True)


class PlainText(_Frozen):
	kind: Literal["text"] = "text"
	text: str


class Bold(_Frozen):
	kind: Literal["bold"] = "bold"
	text: str


InlineSpan = Annotated[Union[PlainText, Bold], Field(discriminator="kind")]


class Break(_Frozen):
	kind: Literal["break"] = "break"


class Heading(_Frozen):
	kind: Literal["heading"] = "heading"
	level: Literal[3] = 3
	text: str


class SubHeading(_Frozen):
	kind: Literal["subheading"] = "subheading"
	level: Literal[4] = 4
	text: str


class BulletItem(_Frozen):
	kind: Literal["bullet"] = "bullet"
	spans: List[InlineSpan]


class Paragraph(_Frozen):
	kind: Literal["paragraph"] = "paragraph"
	spans: List[InlineSpan]


Block = Annotated[
	Union[Break, Heading, SubHeading, BulletItem, Paragraph],
	Field(discriminator="kind"),
]


def decompose(text: str) -> List[InlineSpan]:
	"""Split a line into plain and bold spans.

	Markers pair up greedily left to right. A ``**`` with no closing partner
	stays in the output as literal text. Never returns an empty list: if
	nothing was produced the original text comes back as one PlainText.
	"""
	spans: List[InlineSpan] = []
	rest = text
	while BOLD_MARKER in rest:
		start = rest.find(BOLD_MARKER)
		end = rest.find(BOLD_MARKER, start + len(BOLD_MARKER))
		if end == -1:
			break
		if start > 0:
			spans.append(PlainText(text=rest[:start]))
		spans.append(Bold(text=rest[start + len(BOLD_MARKER):end]))
		rest = rest[end + len(BOLD_MARKER):]
	if rest:
		spans.append(PlainText(text=rest))
	return spans or [PlainText(text=text)]


def _strip_subheading(line: str) -> str:
	# Leading marker first, then a trailing one on what is left ("***" -> "*")
	inner = line[len(BOLD_MARKER):]
	if inner.endswith(BOLD_MARKER):
		inner = inner[:-len(BOLD_MARKER)]
	return inner


def classify_line(line: str) -> Block:
	trimmed = _EDGE_WHITESPACE.sub("", line)
	if not trimmed:
		return Break()
	if trimmed.startswith(HEADING_PREFIX):
		return Heading(text=trimmed[len(HEADING_PREFIX):].replace(BOLD_MARKER, ""))
	if trimmed.startswith(BOLD_MARKER) and trimmed.endswith(BOLD_MARKER):
		return SubHeading(text=_strip_subheading(trimmed))
	if trimmed.startswith(BULLET_PREFIX):
		return BulletItem(spans=decompose(trimmed[len(BULLET_PREFIX):]))
	return Paragraph(spans=decompose(trimmed))


def format_content(text: str) -> List[Block]:
	"""Return one block per ``\\n``-separated line of ``text``, in order."""
	return [classify_line(line) for line in text.split("\n")]
