from __future__ import annotations
import html
from typing import Any, Dict, Iterable, List, Sequence

from .formatter import Block, InlineSpan


BULLET_MARKER = "•"


def _span_html(span: InlineSpan) -> str:
	if span.kind == "bold":
		return f"<strong>{html.escape(span.text)}</strong>"
	if span.kind == "text":
		return html.escape(span.text)
	raise ValueError(f"Unknown span kind: {span.kind!r}")


def _spans_html(spans: Iterable[InlineSpan]) -> str:
	return "".join(_span_html(s) for s in spans)


def _block_html(block: Block) -> str:
	kind = block.kind
	if kind == "break":
		return "<br />"
	if kind == "heading":
		return f'<h3 class="intervention-heading">{html.escape(block.text)}</h3>'
	if kind == "subheading":
		return f'<h4 class="intervention-subheading">{html.escape(block.text)}</h4>'
	if kind == "bullet":
		return (
			'<div class="intervention-bullet">'
			f'<span class="bullet-marker">{BULLET_MARKER}</span>'
			f'<span class="bullet-text">{_spans_html(block.spans)}</span>'
			"</div>"
		)
	if kind == "paragraph":
		return f'<p class="intervention-paragraph">{_spans_html(block.spans)}</p>'
	raise ValueError(f"Unknown block kind: {kind!r}")


def render_html(blocks: Sequence[Block]) -> str:
	"""Render blocks as an HTML fragment, one element per block."""
	body = "\n".join(_block_html(b) for b in blocks)
	return f'<div class="formatted-intervention-content">\n{body}\n</div>'


def _block_text(block: Block) -> str:
	kind = block.kind
	if kind == "break":
		return ""
	if kind in ("heading", "subheading"):
		return block.text
	if kind == "bullet":
		return f"{BULLET_MARKER} " + "".join(s.text for s in block.spans)
	if kind == "paragraph":
		return "".join(s.text for s in block.spans)
	raise ValueError(f"Unknown block kind: {kind!r}")


def render_text(blocks: Sequence[Block]) -> str:
	# Plain rendition for email bodies and exports; bold emphasis is dropped
	return "\n".join(_block_text(b) for b in blocks)


def blocks_to_json(blocks: Sequence[Block]) -> List[Dict[str, Any]]:
	return [b.model_dump(mode="json") for b in blocks]
