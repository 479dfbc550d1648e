"""Narrow HTML escaping applied to literal text at parse time"""


def escape(text: str) -> str:
    """Replace '<' and '>' with entities; quotes and ampersands pass through untouched."""
    return text.replace("<", "&lt;").replace(">", "&gt;")
