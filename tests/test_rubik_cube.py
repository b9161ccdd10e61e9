import random

import numpy as np
import pytest

import rubik_cube as rc


def random_moves(rng, n):
    return [rng.randrange(rc.NMOVES) for _ in range(n)]


def test_move_relations():
    assert rc.rotnames[rc.reverse(rc.rotname_dict["R"])] == "R'"
    assert rc.rotnames[rc.reverse(rc.rotname_dict["F'"])] == "F"
    assert rc.reverse(rc.rotname_dict["B2"]) == rc.rotname_dict["B2"]
    for m in rc.ALL_MOVES:
        assert rc.reverse(rc.reverse(m)) == m
        assert rc.normal(m) == rc.normal(rc.reverse(m))
        assert rc.facenames[rc.normal(m)] == rc.rotnames[m][0]
        assert [rc.is_cw(m), rc.is_ccw(m), rc.is_180(m)].count(True) == 1


def test_prune_move():
    U, D, R, L = (rc.rotname_dict[s] for s in ["U", "D", "R", "L"])
    assert rc.prune_move(U, rc.rotname_dict["U2"])
    assert rc.prune_move(D, U)
    assert not rc.prune_move(U, D)
    assert rc.prune_move(L, R)
    assert not rc.prune_move(R, L)
    assert not rc.prune_move(U, R)
    assert rc.next_moves[rc.NO_MOVE] == rc.ALL_MOVES
    assert len(rc.next_moves[U]) == 15
    assert len(rc.next_moves[D]) == 12


def test_parse_and_format_moves():
    moves = rc.parse_moves("R U'  F2")
    assert moves == [2, 6, 16]
    assert rc.format_moves(moves) == "R U' F2"
    assert rc.parse_moves(["B", 13]) == [5, 13]


@pytest.mark.parametrize("bad", ["R3", "x", "U''"])
def test_parse_moves_rejects_unknown_symbols(bad):
    with pytest.raises(ValueError):
        rc.parse_moves(bad)


@pytest.mark.parametrize("bad", [18, -1, 2.5])
def test_parse_moves_rejects_unknown_ids(bad):
    with pytest.raises(ValueError):
        rc.cube_state.from_moves([bad])


def test_identity_state():
    cube = rc.cube_state()
    assert cube.is_solved()
    assert cube.ep.tolist() == list(range(12))
    assert cube.cp.tolist() == list(range(8))
    assert not cube.eo.arr.any()
    assert not cube.co.arr.any()
    assert rc.ep_encode(cube.ep) == 479001599
    assert rc.eo_encode(cube.eo) == 0
    assert rc.co_encode(cube.co) == 0


def test_quarter_turn_touches_one_face():
    cube = rc.cube_state.from_moves("R")
    assert cube.ep.tolist() == [0, 6, 2, 3, 4, 1, 9, 7, 8, 5, 10, 11]
    assert cube.cp.tolist() == [0, 2, 6, 3, 4, 1, 5, 7]
    assert cube.eo.arr.tolist() == [False, True, False, False, False, True,\
                                    True, False, False, True, False, False]
    assert cube.co.tolist() == [0, 2, 1, 0, 0, 1, 2, 0]


def test_orientation_rules():
    # U and D turns never change orientation, F and B never flip edges
    for s in ["U", "U'", "D2", "F", "B'"]:
        cube = rc.cube_state.from_moves(s)
        assert not cube.eo.arr.any()
    for s in ["U", "D'", "R2", "F2"]:
        cube = rc.cube_state.from_moves(s)
        assert not cube.co.arr.any()
    cube = rc.cube_state.from_moves("L")
    assert cube.eo.arr.sum() == 4
    assert cube.co.arr.sum() % 3 == 0


def test_move_then_reverse_is_identity():
    rng = random.Random(1234)
    for _ in range(5):
        start = rc.cube_state.from_moves(random_moves(rng, 25))
        for m in rc.ALL_MOVES:
            cube = start.copy()
            cube.rotate(m)
            assert cube != start
            cube.rotate(rc.reverse(m))
            assert cube == start


def test_copy_is_independent():
    cube = rc.cube_state.from_moves("R U")
    other = cube.copy()
    other.rotate(rc.rotname_dict["F"])
    assert cube == rc.cube_state.from_moves("R U")
    assert other != cube


def test_scramble_then_inverse_is_solved():
    rng = random.Random(99)
    moves = random_moves(rng, 40)
    cube = rc.cube_state.from_moves(moves)
    assert not cube.is_solved()
    cube.apply_moves(rc.invert_moves(moves))
    assert cube.is_solved()


def sequence_order(seq, limit=2000):
    moves = rc.parse_moves(seq)
    cube = rc.cube_state()
    for n in range(1, limit + 1):
        cube.apply_moves(moves)
        if cube.is_solved():
            return n
    return None


@pytest.mark.parametrize("seq, order", [
    ("R", 4),
    ("F2", 2),
    ("R U", 105),
    ("R U R' U'", 6),
    ("R U2 D' B D'", 1260),
])
def test_known_sequence_orders(seq, order):
    assert sequence_order(seq) == order


def test_orientation_sums_stay_valid():
    rng = random.Random(7)
    for _ in range(20):
        cube = rc.cube_state.from_moves(random_moves(rng, 30))
        assert cube.eo.arr.sum() % 2 == 0
        assert cube.co.arr.sum() % 3 == 0
        assert sorted(cube.ep.tolist()) == list(range(12))
        assert sorted(cube.cp.tolist()) == list(range(8))


def test_encoders_stay_in_range():
    rng = random.Random(5)
    for _ in range(50):
        cube = rc.cube_state.from_moves(random_moves(rng, 30))
        assert 0 <= rc.eo_encode(cube.eo) < 2048
        assert 0 <= rc.co_encode(cube.co) < 2187
        assert 0 <= rc.cp_encode(cube.cp) < 40320
        assert 0 <= rc.ep_encode(cube.ep) < 479001600


@pytest.mark.parametrize("seq, expected", [
    ("R R", "R2"),
    ("R R'", ""),
    ("R2 R", "R'"),
    ("R L R", "R2 L"),
    ("U D U'", "D"),
    ("U R U", "U R U"),
    ("F B F2 B'", "F'"),
])
def test_simplify_moves(seq, expected):
    assert rc.format_moves(rc.simplify_moves(seq)) == expected


def test_simplify_keeps_the_same_state():
    rng = random.Random(11)
    for _ in range(20):
        moves = random_moves(rng, 15)
        short = rc.simplify_moves(moves)
        assert len(short) <= len(moves)
        assert rc.cube_state.from_moves(short) == rc.cube_state.from_moves(moves)


def test_coordinate_arrays_keep_dtype():
    cube = rc.cube_state.from_moves("R U F' L2")
    assert cube.eo.arr.dtype == np.bool_
    assert cube.co.arr.dtype == np.int8
    assert cube.ep.arr.dtype == np.int8
