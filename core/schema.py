# =============================================================================
# core/schema.py  —  Schema Inference
# =============================================================================
#
# Azure tables have no declared schema.  We infer one by looking at every
# row: each field collects the set of type tags it was seen with.
#
#   rows:   {a: "x"}, {a: 1, b: true}
#   schema: {a: ["string", "number"], b: ["boolean"]}
#
# A field missing from a row says nothing about that row.  A field with
# mixed types keeps all of them, in the order they were first seen.
# =============================================================================

from typing import Iterable

from core.models import Row, TableSchema


def infer_schema(rows: Iterable[Row]) -> TableSchema:
    """Collect the type tags of every field across all rows."""
    # dict-as-ordered-set keeps first-observation order
    seen: dict[str, dict[str, None]] = {}
    for row in rows:
        for name, value in row.items():
            seen.setdefault(name, {})[value.kind.value] = None

    return TableSchema(fields={name: list(kinds) for name, kinds in seen.items()})
