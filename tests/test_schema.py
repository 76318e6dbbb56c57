from datetime import datetime

from core.models import row_from_entity
from core.schema import infer_schema


def _rows(*entities):
    return [row_from_entity(entity) for entity in entities]


def test_mixed_types_accumulate_in_first_seen_order():
    schema = infer_schema(_rows({"a": "x"}, {"a": 1}))
    assert schema.to_payload() == {"a": ["string", "number"]}


def test_repeated_types_are_listed_once():
    schema = infer_schema(_rows({"a": 1}, {"a": 2.5}, {"a": 3}))
    assert schema.fields == {"a": ["number"]}


def test_missing_fields_do_not_constrain_other_rows():
    schema = infer_schema(_rows(
        {"PartitionKey": "p", "RowKey": "1", "email": "a@b.c"},
        {"PartitionKey": "p", "RowKey": "2", "active": True, "joined": datetime(2024, 1, 1)},
        {"PartitionKey": "p", "RowKey": "3", "email": None},
    ))
    assert schema.to_payload() == {
        "PartitionKey": ["string"],
        "RowKey": ["string"],
        "email": ["string", "null"],
        "active": ["boolean"],
        "joined": ["date"],
    }
    assert list(schema.fields) == ["PartitionKey", "RowKey", "email", "active", "joined"]


def test_empty_table_has_empty_schema():
    assert infer_schema([]).to_payload() == {}


def test_consumes_a_generator():
    rows = (row_from_entity({"n": i}) for i in range(3))
    assert infer_schema(rows).fields == {"n": ["number"]}
