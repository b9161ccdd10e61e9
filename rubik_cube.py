#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Nov 23 19:46:24 2020

@author: cjburke
Cubie level model of the 3x3x3 cube.
The cube state is split into four coordinates that can each be turned on
their own: edge permutation, edge orientation, corner permutation and
corner orientation.  A turn only touches the 4 slots on the turned face
so every coordinate turn is a roll of those 4 slots.

Moves are integer ids
  0-5   U  D  R  L  F  B   clockwise quarter turns
  6-11  U' D' R' L' F' B'  counter clockwise quarter turns
  12-17 U2 D2 R2 L2 F2 B2  half turns
Faces are U=0, D=1, R=2, L=3, F=4, B=5 so normal(move) == move % 6
"""

import numpy as np
from lehmer_code import encode_perm

rotnames = ["U", "D", "R", "L", "F", "B",\
            "U'", "D'", "R'", "L'", "F'", "B'",\
            "U2", "D2", "R2", "L2", "F2", "B2"]
facenames = ["U", "D", "R", "L", "F", "B"]
rotname_dict = {name: i for i, name in enumerate(rotnames)}

NMOVES = 18
# key used in next_moves when there was no previous move
NO_MOVE = 18

ALL_MOVES = list(range(NMOVES))
PHASE2_MOVES = [0, 6, 12,\
                1, 7, 13,\
                14, 15, 16, 17]
PHASE2_MEDGE_MOVES = [14, 15, 16, 17]

# Slots turned by each face, in clockwise order
# corners ULB UBR URF UFL DBL DRB DFR DLF
CORNER_GROUP = np.array([[0, 1, 2, 3],\
                         [7, 6, 5, 4],\
                         [2, 1, 5, 6],\
                         [0, 3, 7, 4],\
                         [3, 2, 6, 7],\
                         [1, 0, 4, 5]], dtype=np.intp)
# edges UB UR UF UL LB RB RF LF DB DR DF DL
EDGE_GROUP = np.array([[0, 1, 2, 3],\
                       [11, 10, 9, 8],\
                       [1, 5, 9, 6],\
                       [3, 7, 11, 4],\
                       [2, 6, 10, 7],\
                       [0, 4, 8, 5]], dtype=np.intp)
# twist added to the turned corners on a quarter turn of R L F B
CORNER_TWIST = np.array([1, 2, 1, 2], dtype=np.int8)
# labels and slots of the middle layer edges LB RB RF LF
MEDGE_LO = 4
MEDGE_HI = 8

# give the direction of the roll needed to move the slot contents during a move
move2shifts = [1, 1, 1, 1, 1, 1,\
               -1, -1, -1, -1, -1, -1,\
               2, 2, 2, 2, 2, 2]


def reverse(move):
    if move < 6:
        return move + 6
    if move < 12:
        return move - 6
    return move


def normal(move):
    return move % 6


def is_cw(move):
    return move < 6


def is_ccw(move):
    return 6 <= move < 12


def is_180(move):
    return move >= 12


def prune_move(prev, cur):
    # True if cur is redundant after prev:
    #  same face twice in a row or two commuting opposite faces in the
    #  non canonical order
    np_ = prev % 6
    nn = cur % 6
    return np_ == nn or (np_ // 2 == nn // 2 and np_ > nn)


# only do the following moves if the last move was as key
# this is used to prune redundant moves
next_moves = {NO_MOVE: list(ALL_MOVES)}
for _prev in ALL_MOVES:
    next_moves[_prev] = [m for m in ALL_MOVES if not prune_move(_prev, m)]

# Source slots for each move such that new[group] = old[source]
corner_sources = np.array([np.roll(CORNER_GROUP[normal(m)], move2shifts[m])\
                           for m in ALL_MOVES], dtype=np.intp)
edge_sources = np.array([np.roll(EDGE_GROUP[normal(m)], move2shifts[m])\
                         for m in ALL_MOVES], dtype=np.intp)


class cube_coord():
    """
    One coordinate of the cube: an array with one entry per slot.
    Subclasses pick the slot groups and what happens to the
    orientation on a quarter turn.
    """
    GROUP = None
    SOURCES = None
    NSLOTS = 0
    DTYPE = np.int8

    def __init__(self, arr=None):
        if arr is None:
            self.arr = self.identity_array()
        else:
            self.arr = np.array(arr, dtype=self.DTYPE)

    @classmethod
    def identity_array(cls):
        return np.arange(cls.NSLOTS, dtype=cls.DTYPE)

    def rotate(self, move):
        grp = self.GROUP[move % 6]
        self.arr[grp] = self.arr[self.SOURCES[move]]

    def copy(self):
        new = self.__class__.__new__(self.__class__)
        new.arr = self.arr.copy()
        return new

    def is_identity(self):
        return np.array_equal(self.arr, self.identity_array())

    def tolist(self):
        return self.arr.tolist()

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return np.array_equal(self.arr, other.arr)

    def __repr__(self):
        return '{0}({1})'.format(self.__class__.__name__, self.arr.tolist())


class edge_perm(cube_coord):
    GROUP = EDGE_GROUP
    SOURCES = edge_sources
    NSLOTS = 12


class corner_perm(cube_coord):
    GROUP = CORNER_GROUP
    SOURCES = corner_sources
    NSLOTS = 8


class edge_orient(cube_coord):
    GROUP = EDGE_GROUP
    SOURCES = edge_sources
    NSLOTS = 12
    DTYPE = np.bool_

    @classmethod
    def identity_array(cls):
        return np.zeros((cls.NSLOTS,), dtype=cls.DTYPE)

    def rotate(self, move):
        face = move % 6
        grp = self.GROUP[face]
        self.arr[grp] = self.arr[self.SOURCES[move]]
        # quarter turns of R or L flip the 4 edges
        if move < 12 and (face == 2 or face == 3):
            self.arr[grp] = np.logical_not(self.arr[grp])


class corner_orient(cube_coord):
    GROUP = CORNER_GROUP
    SOURCES = corner_sources
    NSLOTS = 8

    @classmethod
    def identity_array(cls):
        return np.zeros((cls.NSLOTS,), dtype=cls.DTYPE)

    def rotate(self, move):
        face = move % 6
        grp = self.GROUP[face]
        self.arr[grp] = self.arr[self.SOURCES[move]]
        # quarter turns of every face but U and D twist the 4 corners
        if move < 12 and face > 1:
            self.arr[grp] = (self.arr[grp] + CORNER_TWIST) % 3


# various encoders
EO_WEIGHTS = np.array([1024,512,256,128,64,32,16,8,4,2,1], dtype=np.int64)
CO_WEIGHTS = np.array([729,243,81,27,9,3,1], dtype=np.int64)


def ep_encode(ep):
    return encode_perm(ep.arr.tolist())


def cp_encode(cp):
    return encode_perm(cp.arr.tolist())


def eo_encode(eo):
    # last flag is fixed by the other 11
    return int(np.sum(eo.arr[0:-1] * EO_WEIGHTS))


def co_encode(co):
    # last twist is fixed by the other 7
    return int(np.sum(co.arr[0:-1] * CO_WEIGHTS))


class cube_state():
    """
    Full cube: edge permutation, corner permutation, edge orientation and
    corner orientation.  Only states replayed from the solved cube are
    ever built, see from_moves.
    """
    def __init__(self):
        self.ep = edge_perm()
        self.cp = corner_perm()
        self.eo = edge_orient()
        self.co = corner_orient()

    @classmethod
    def from_moves(cls, moves):
        cube = cls()
        cube.apply_moves(moves)
        return cube

    def rotate(self, move):
        self.ep.rotate(move)
        self.cp.rotate(move)
        self.eo.rotate(move)
        self.co.rotate(move)

    def apply_moves(self, moves):
        for curMove in parse_moves(moves):
            self.rotate(curMove)
        return self

    def copy(self):
        new = self.__class__.__new__(self.__class__)
        new.ep = self.ep.copy()
        new.cp = self.cp.copy()
        new.eo = self.eo.copy()
        new.co = self.co.copy()
        return new

    def is_solved(self):
        return self.ep.is_identity() and self.cp.is_identity() and\
            self.eo.is_identity() and self.co.is_identity()

    def __eq__(self, other):
        if not isinstance(other, cube_state):
            return NotImplemented
        return self.ep == other.ep and self.cp == other.cp and\
            self.eo == other.eo and self.co == other.co

    def __repr__(self):
        return 'cube_state(ep={0}, cp={1}, eo={2}, co={3})'.format(\
            self.ep.tolist(), self.cp.tolist(),\
            [int(x) for x in self.eo.tolist()], self.co.tolist())


def parse_moves(moves):
    # Accepts "R U' F2" style text or a sequence of symbols or move ids
    if isinstance(moves, str):
        moves = moves.split()
    out = []
    for curMove in moves:
        if isinstance(curMove, str):
            if curMove not in rotname_dict:
                raise ValueError('Unknown move symbol {0!r}'.format(curMove))
            out.append(rotname_dict[curMove])
        else:
            try:
                moveId = int(curMove)
            except (TypeError, ValueError):
                raise ValueError('Unknown move id {0!r}'.format(curMove))
            if isinstance(curMove, bool) or moveId != curMove or not 0 <= moveId < NMOVES:
                raise ValueError('Unknown move id {0!r}'.format(curMove))
            out.append(moveId)
    return out


def format_moves(moves):
    return ' '.join(rotnames[m] for m in moves)


def invert_moves(moves):
    return [reverse(m) for m in reversed(parse_moves(moves))]


# quarter turns per move: cw = 1, half = 2, ccw = 3
move2quarters = [1, 1, 1, 1, 1, 1,\
                 3, 3, 3, 3, 3, 3,\
                 2, 2, 2, 2, 2, 2]
quarters2offset = {1: 0, 2: 12, 3: 6}


def simplify_moves(moves):
    # Merge turns of the same face that are next to each other, also
    #  when an opposite face turn sits between them since those commute
    out = []
    for curMove in parse_moves(moves):
        face = curMove % 6
        hit = None
        if len(out) > 0 and out[-1] % 6 == face:
            hit = len(out) - 1
        elif len(out) > 1 and out[-1] % 6 // 2 == face // 2 and out[-2] % 6 == face:
            hit = len(out) - 2
        if hit is None:
            out.append(curMove)
            continue
        quarters = (move2quarters[out[hit]] + move2quarters[curMove]) % 4
        if quarters == 0:
            del out[hit]
        else:
            out[hit] = face + quarters2offset[quarters]
    return out
