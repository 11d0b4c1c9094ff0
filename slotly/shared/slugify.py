import re

# ASCII word characters only; accented letters are dropped, not kept
_NON_SLUG_CHARS = re.compile(r"[^A-Za-z0-9_\s-]")
_SEPARATOR_RUNS = re.compile(r"[\s_-]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def slugify(text: str) -> str:
    """
    Turn a title into a URL slug.

    "30 Minute Meeting" -> "30-minute-meeting"
    """
    text = text.lower().strip()
    text = _NON_SLUG_CHARS.sub("", text)
    text = _SEPARATOR_RUNS.sub("-", text)
    return _EDGE_HYPHENS.sub("", text)
