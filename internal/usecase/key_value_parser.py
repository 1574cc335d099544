"""
Key/value list parsing for search terms and facets.

Clients send terms and facets as "key:value1,value2" strings.
"""
from typing import Iterable, Optional

from internal.domain.value_objects import KeyValues


NAME_VALUE_DELIMITER = ":"
VALUES_DELIMITER = ","


def parse_key_values(items: Optional[Iterable[str]]) -> list[KeyValues]:
    """
    Parse raw "key:v1,v2" strings into key/value groups.

    Entries sharing a key (case-sensitive) are merged into one group whose
    values are distinct and keep first-seen order. Entries without a colon
    are skipped and empty value segments are discarded.

    Args:
        items: Raw term or facet strings.

    Returns:
        One group per distinct key, in first-seen key order.
    """
    groups: dict[str, dict[str, None]] = {}

    for item in items or ():
        parts = item.split(NAME_VALUE_DELIMITER, 1)
        if len(parts) != 2:
            continue

        key, raw_values = parts
        values = groups.setdefault(key, {})
        for value in raw_values.split(VALUES_DELIMITER):
            if value:
                values.setdefault(value, None)

    return [KeyValues(key=key, values=tuple(values)) for key, values in groups.items()]
