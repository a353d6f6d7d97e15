import pytest

from src.pq.base.exceptions import InvalidArgument
from src.pq.base.predicate import (
    MATCH_ALL,
    And,
    Compare,
    eq,
    ge,
    gt,
    key_range,
    le,
    lt,
    ne,
    predicate_from_dict,
)
from src.pq.base.prefix_range import PrefixRange

ROW = {"PartitionKey": "P", "RowKey": "2024-01-15", "kind": "order"}


def test_compare_operators():
    assert eq("kind", "order").evaluate(ROW)
    assert ne("kind", "refund").evaluate(ROW)
    assert lt("RowKey", "2024-02").evaluate(ROW)
    assert le("RowKey", "2024-01-15").evaluate(ROW)
    assert gt("RowKey", "2024-01").evaluate(ROW)
    assert ge("RowKey", "2024-01-15").evaluate(ROW)
    assert not gt("RowKey", "2024-01-15").evaluate(ROW)


def test_missing_column_never_matches():
    assert not eq("missing", None).evaluate(ROW)
    assert not ne("missing", "x").evaluate(ROW)


def test_incomparable_types_do_not_match():
    assert not lt("RowKey", b"2024").evaluate(ROW)
    assert not ge("RowKey", None).evaluate(ROW)


def test_unknown_operator_is_rejected():
    with pytest.raises(InvalidArgument):
        Compare("RowKey", "like", "2024%")


def test_empty_column_is_rejected():
    with pytest.raises(InvalidArgument):
        Compare("", "eq", 1)


@pytest.mark.parametrize("value", [[1], {"a": 1}, ("a",), object()])
def test_non_scalar_value_is_rejected(value):
    with pytest.raises(InvalidArgument):
        Compare("PartitionKey", "eq", value)


def test_and_flattens_conjunctions():
    p = eq("PartitionKey", "P") & (ge("RowKey", "a") & lt("RowKey", "b"))
    assert p == And((eq("PartitionKey", "P"), ge("RowKey", "a"), lt("RowKey", "b")))
    assert (MATCH_ALL & eq("kind", "order")) == And((eq("kind", "order"),))


def test_match_all_matches_everything():
    assert MATCH_ALL.evaluate(ROW)
    assert MATCH_ALL.evaluate({})


def test_and_requires_every_clause():
    p = eq("PartitionKey", "P") & eq("kind", "refund")
    assert not p.evaluate(ROW)


def test_key_range_is_half_open():
    p = key_range("RowKey", PrefixRange("2024-01"))
    assert p == ge("RowKey", "2024-01") & lt("RowKey", "2024-02")
    assert p.evaluate({"RowKey": "2024-01"})
    assert not p.evaluate({"RowKey": "2024-02"})


def test_key_range_without_upper_bound():
    p = key_range("RowKey", PrefixRange(chr(0x10FFFF)))
    assert p == ge("RowKey", chr(0x10FFFF))


def test_dict_form_rebuilds_the_same_tree():
    p = eq("PartitionKey", "P") & ge("RowKey", "a") & lt("RowKey", "b")
    data = p.to_dict()
    assert data == {
        "and": [
            {"column": "PartitionKey", "op": "eq", "value": "P"},
            {"column": "RowKey", "op": "ge", "value": "a"},
            {"column": "RowKey", "op": "lt", "value": "b"},
        ]
    }
    assert predicate_from_dict(data) == p


@pytest.mark.parametrize(
    "data",
    [
        "RowKey = 1",
        {"and": "not-a-list"},
        {"column": "RowKey", "op": "eq"},
        {"column": "RowKey", "op": "between", "value": 1},
        {"and": [{"op": "eq", "value": 1}]},
        {"column": "PartitionKey", "op": "eq", "value": [1]},
        {"column": "PartitionKey", "op": "eq", "value": {"a": 1}},
    ],
)
def test_malformed_dict_is_rejected(data):
    with pytest.raises(InvalidArgument):
        predicate_from_dict(data)
