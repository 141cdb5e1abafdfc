import pytest

from fadungeon import rng


def test_same_seed_gives_same_sequence():
    rng.seed(1234)
    first = [rng.random_in_range(0, 1000) for _ in range(20)]
    rng.seed(1234)
    second = [rng.random_in_range(0, 1000) for _ in range(20)]
    assert first == second


def test_random_in_range_is_inclusive_and_bounded():
    rng.seed(7)
    values = {rng.random_in_range(3, 7) for _ in range(500)}
    assert values == {3, 4, 5, 6, 7}


def test_random_in_range_single_value():
    rng.seed(1)
    assert rng.random_in_range(9, 9) == 9


def test_random_in_range_rejects_empty_range():
    with pytest.raises(ValueError):
        rng.random_in_range(5, 4)


def test_norm_rand_stays_in_range():
    rng.seed(99)
    values = [rng.norm_rand(4, 10) for _ in range(1000)]
    assert min(values) >= 4
    assert max(values) <= 10


def test_norm_rand_favours_small_values():
    rng.seed(5)
    values = [rng.norm_rand(4, 10) for _ in range(2000)]
    low = sum(1 for v in values if v <= 6)
    high = sum(1 for v in values if v >= 8)
    assert low > high


def test_norm_rand_degenerate_range():
    rng.seed(3)
    assert rng.norm_rand(4, 4) == 4


def test_norm_rand_rejects_empty_range():
    with pytest.raises(ValueError):
        rng.norm_rand(10, 4)


def test_norm_rand_is_reproducible():
    rng.seed(42)
    first = [rng.norm_rand(0, 20) for _ in range(10)]
    rng.seed(42)
    second = [rng.norm_rand(0, 20) for _ in range(10)]
    assert first == second


def test_choose_one_returns_an_option():
    rng.seed(11)
    options = ["a", "b", "c"]
    picks = {rng.choose_one(options) for _ in range(200)}
    assert picks == set(options)


def test_choose_one_accepts_iterables():
    rng.seed(2)
    assert rng.choose_one(iter(["only"])) == "only"


def test_choose_one_rejects_empty():
    with pytest.raises(ValueError):
        rng.choose_one([])