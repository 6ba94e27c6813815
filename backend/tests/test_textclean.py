from concern2care.textclean import sanitize_for_storage, truncate_with_notice


def test_sanitize_removes_control_characters():
	assert sanitize_for_storage("  a\x00b\x07c\x7f\ufffd\td\ne\r\n ") == "abc\td\ne"


def test_sanitize_passes_empty_values_through():
	assert sanitize_for_storage("") == ""
	assert sanitize_for_storage(None) is None


def test_truncate_within_limit_is_unchanged():
	assert truncate_with_notice("abc", 3, "Document") == "abc"


def test_truncate_appends_notice():
	text = truncate_with_notice("x" * 60000, 50000, "Document")
	assert text.startswith("x" * 50000 + "\n\n")
	assert text.endswith("[Document truncated due to length - showing first 50,000 characters]")
