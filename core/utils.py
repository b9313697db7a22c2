import re

_WHITESPACE = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Lower-case the title and replace each whitespace run with a hyphen"""
    return _WHITESPACE.sub("-", title.lower())
