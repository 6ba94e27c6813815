from __future__ import annotations
import re
from typing import Optional


# C0 controls except \t \n \r, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_REPLACEMENT_CHAR = "\ufffd"


def sanitize_for_storage(text: Optional[str]) -> Optional[str]:
	"""Strip characters that break text columns (NUL, control chars, U+FFFD)."""
	if not text:
		return text
	cleaned = _CONTROL_CHARS.sub("", text).replace(_REPLACEMENT_CHAR, "")
	return cleaned.strip()


def truncate_with_notice(text: str, limit: int, label: str) -> str:
	if len(text) <= limit:
		return text
	return f"{text[:limit]}\n\n[{label} truncated due to length - showing first {limit:,} characters]"
