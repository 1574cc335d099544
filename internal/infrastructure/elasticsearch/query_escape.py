"""
Query escaping for the Lucene query-string grammar.
"""

# Characters with a meaning in query_string syntax
RESERVED_CHARACTERS = frozenset('\\+-=!():^[]"{}~*?|&/')

# Characters that cannot be escaped in query_string syntax
REMOVED_CHARACTERS = frozenset("<>")


def escape_search_term(text: str) -> str:
    """
    Escape reserved query-string characters with a backslash.

    "&&" and "||" are operators in the grammar; escaping every "&" and "|"
    covers them. "<" and ">" are dropped.

    Args:
        text: Raw keyword.

    Returns:
        Escaped keyword.
    """
    return "".join(
        f"\\{ch}" if ch in RESERVED_CHARACTERS else ch
        for ch in text
        if ch not in REMOVED_CHARACTERS
    )
