"""Utility functions for the box blueprint."""

import re

_DISALLOWED = re.compile(r"[^a-z0-9\s]")


def normalize_name(name):
    """Lower-case a box name and strip everything but letters, digits and spaces."""
    return _DISALLOWED.sub("", (name or "").strip().lower())


def search_keywords(text):
    """Split a name or query into the normalized keywords stored on a box.

    >>> search_keywords("Iron Yard CrossFit!")
    ['iron', 'yard', 'crossfit']
    """
    return [keyword for keyword in normalize_name(text).split() if keyword]


def canonical_name(name):
    """Return the form two box names are compared in for duplicates.

    >>> canonical_name("  Iron   Yard CrossFit! ")
    'iron yard crossfit'
    """
    return " ".join(search_keywords(name))
