"""Airtable formula utility functions."""


def quote_formula_string(value: str | None) -> str:
    """Render a value as a single-quoted Airtable formula string literal.

    Backslashes and single quotes are escaped so the value can never close
    the literal early and inject formula syntax of its own.

    Args:
        value: Raw user-supplied text (e.g., a category or tag)

    Returns:
        The quoted literal, ready to interpolate into a formula

    Examples:
        >>> quote_formula_string("potting-soil")
        "'potting-soil'"
        >>> quote_formula_string("gardener's mix")
        "'gardener\\\\'s mix'"
        >>> quote_formula_string(None)
        "''"
    """
    if value is None:
        value = ""

    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def field_ref(name: str) -> str:
    """Reference a field by name, e.g. {in_stock}.

    Examples:
        >>> field_ref("tags")
        '{tags}'
    """
    return "{" + name + "}"
