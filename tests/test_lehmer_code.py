import itertools
import math

import pytest

import lehmer_code as lc


@pytest.mark.parametrize("n", range(1, 9))
def test_encode_perm_is_a_bijection(n):
    codes = {lc.encode_perm(p) for p in itertools.permutations(range(n))}
    assert codes == set(range(math.factorial(n)))


def test_encode_perm_accepts_numpy_values():
    import numpy as np
    p = np.array([3, 1, 0, 2], dtype=np.int8)
    assert lc.encode_perm(p) == lc.encode_perm([3, 1, 0, 2])


def test_encode_perm_refuses_long_input():
    with pytest.raises(ValueError):
        lc.encode_perm(list(range(13)))


@pytest.mark.parametrize("subset, expected", [
    ([8, 9, 10, 11], 0),
    ([3, 6, 9, 11], 62),
    ([1, 4, 8, 9], 305),
    ([0, 1, 2, 3], 494),
])
def test_encode_comb_known_values(subset, expected):
    assert lc.encode_comb(subset, 12) == expected


def test_encode_comb_ignores_order():
    assert lc.encode_comb([11, 3, 9, 6], 12) == 62


def test_encode_comb_opt_matches_encode_comb():
    codes = set()
    for subset in itertools.combinations(range(12), 4):
        occupied = [i in subset for i in range(12)]
        code = lc.encode_comb(list(subset), 12)
        assert lc.encode_comb_opt(occupied, 4) == code
        codes.add(code)
    assert codes == set(range(495))


def test_binomial_table():
    assert lc.useCombs.shape == (13, 4)
    assert lc.useCombs[12, 3] == 220
    assert lc.useFacts[12] == 479001600
