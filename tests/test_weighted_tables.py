import random

import pytest

from stellarforge.generation.galaxy import STAR_TYPE_TABLE, STAR_TYPES
from stellarforge.generation.tables import BucketTable, WeightedTable


def test_weighted_table_rejects_empty_and_non_positive_weights() -> None:
    with pytest.raises(ValueError, match="at least one entry"):
        WeightedTable.of()
    with pytest.raises(ValueError, match=r"entries\[1\] weight must be > 0"):
        WeightedTable.of((1, "a"), (0, "b"))
    with pytest.raises(ValueError, match="numeric"):
        WeightedTable.of((True, "a"))


def test_weighted_table_select_walks_cumulative_weights() -> None:
    table = WeightedTable.of((1, "a"), (4, "b"), (5, "c"))

    assert table.select(0) == "a"
    assert table.select(1) == "b"
    assert table.select(4.99) == "b"
    assert table.select(5) == "c"
    assert table.select(9) == "c"


def test_weighted_table_select_past_total_returns_last_entry() -> None:
    table = WeightedTable.of((0.5, "a"), (0.25, "b"))

    assert table.select(0.75) == "b"
    assert table.select(10.0) == "b"


def test_integer_table_draws_with_randrange_over_total() -> None:
    table = WeightedTable.of((3, "peace"), (7, "war"))
    expected_rng = random.Random(11)
    rng = random.Random(11)

    for _ in range(50):
        assert table.choose(rng) == table.select(expected_rng.randrange(10))


def test_float_table_draws_with_uniform_roll() -> None:
    table = WeightedTable.of((0.9, "core"), (0.05, "void"))
    expected_rng = random.Random(3)
    rng = random.Random(3)

    for _ in range(50):
        assert table.choose(rng) == table.select(expected_rng.random() * table.total_weight)


def test_star_type_bucket_probabilities_match_table() -> None:
    assert STAR_TYPE_TABLE.probability("blue_giant") == pytest.approx(0.02)
    assert STAR_TYPE_TABLE.probability("white") == pytest.approx(0.09)
    assert STAR_TYPE_TABLE.probability("yellow") == pytest.approx(0.30)
    assert STAR_TYPE_TABLE.probability("orange") == pytest.approx(0.30)
    assert STAR_TYPE_TABLE.probability("red_dwarf") == pytest.approx(0.25)
    assert STAR_TYPE_TABLE.probability("neutron") == pytest.approx(0.03)
    assert STAR_TYPE_TABLE.probability("black_hole") == pytest.approx(0.01)


def test_bucket_table_lookup_is_total() -> None:
    assert STAR_TYPE_TABLE.lookup(0) == "blue_giant"
    assert STAR_TYPE_TABLE.lookup(1) == "blue_giant"
    assert STAR_TYPE_TABLE.lookup(2) == "white"
    assert STAR_TYPE_TABLE.lookup(40) == "yellow"
    assert STAR_TYPE_TABLE.lookup(41) == "orange"
    assert STAR_TYPE_TABLE.lookup(99) == "black_hole"
    assert {STAR_TYPE_TABLE.lookup(roll) for roll in range(100)} == set(STAR_TYPES)


def test_bucket_table_rejects_bad_bounds() -> None:
    with pytest.raises(ValueError, match="strictly increasing"):
        BucketTable.from_bounds(10, ((5, "a"), (5, "b"), (9, "c")))
    with pytest.raises(ValueError, match="whole roll range"):
        BucketTable.from_bounds(10, ((4, "a"), (8, "b")))
