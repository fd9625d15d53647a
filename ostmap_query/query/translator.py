"""Translate a token/field pair into a term-index scan."""

from __future__ import annotations

import logging

from ostmap_query.exceptions import ValidationError
from ostmap_query.query.ranges import exact_range, prefix_range, to_bytes
from ostmap_query.query.specs import TERM_INDEX_TABLE, SubstringFilter, TermScanSpec

log = logging.getLogger(__name__)

WILDCARD = b"*"


def has_wildcard(token: bytes | str) -> bool:
    """Check if the token ends with the wildcard marker."""
    return to_bytes(token).endswith(WILDCARD)


def translate_term(token: bytes | str, field: str) -> TermScanSpec:
    """Build the term-index scan for ``token`` restricted to ``field``.

    A token ending in ``*`` becomes a prefix scan over the remaining
    bytes. Any other token becomes an exact-row scan with a substring
    filter on the same term. A ``*`` anywhere but the end is literal.

    Args:
        token: Search text, as bytes or text.
        field: Name of the indexed field (column family) to search.

    Returns:
        The scan specification.

    Raises:
        ValidationError: If ``field`` is empty.
    """
    if not field:
        raise ValidationError("field", field, "field name must not be empty")

    raw = to_bytes(token)
    if has_wildcard(raw):
        prefix = raw[: -len(WILDCARD)]
        spec = TermScanSpec(TERM_INDEX_TABLE, field, prefix_range(prefix))
    else:
        # The filter repeats the exact-row constraint. Rows holding more
        # than the bare token would still be narrowed by it.
        spec = TermScanSpec(TERM_INDEX_TABLE, field, exact_range(raw), SubstringFilter(raw))

    log.debug("Translated token %r in field %s to %r", raw, field, spec.range)
    return spec
