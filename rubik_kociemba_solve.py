#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Dec 23 23:32:28 2020

@author: cjburke
Solve the rubik's cube with the two phase (Kociemba) algorithm.
Phase 1 brings the cube into the subgroup where every edge and corner is
  oriented and the 4 middle layer edges sit in the middle layer.
Phase 2 solves the cube inside that subgroup using only U, D quarter turns
  and R, L, F, B half turns.
Both phases are iterative deepening depth first searches over the
integer table indices, turned with the move tables of rubik_prune_db.  The
precalculated pruning databases give the min number of moves needed to
solve part of the cube, so a path is stopped as soon as that number is
larger than the moves left at the current depth bound.
Every phase 1 solution found at a bound is handed to phase 2 and the
search stops at the first combination no longer than the target length
(or keeps going for the shortest one in 'shortest' mode).

  python rubik_kociemba_solve.py "F2 D L U2 B2 L' B2"
"""

import collections
import logging
import sys
from timeit import default_timer as timer

import numpy as np

import rubik_cube as rc
import rubik_prune_db as rpd

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

TARGET_LENGTH = 22
MAX_PHASE1_DEPTH = 12
MAX_PHASE2_DEPTH = 18
# once a combination is known phase 2 is capped so that
#  len(phase1) + len(phase2) <= len(best) - PHASE2_MARGIN
# 1 keeps every strictly shorter raw combination, 2 skips the ones that
#  are only one move shorter
PHASE2_MARGIN = 1

MODE_FIRST = 'first'
MODE_SHORTEST = 'shortest'

# phase 2 moves allowed after each phase 2 move, in PHASE2_MOVES order
phase2_next_moves = {}
for _prev in [rc.NO_MOVE] + rc.PHASE2_MOVES:
    phase2_next_moves[_prev] = [m for m in rc.PHASE2_MOVES\
                                if _prev == rc.NO_MOVE or not rc.prune_move(_prev, m)]


class phase1_repr():

    def __init__(self, eo, co, ep):
        self.eo = eo
        self.co = co
        self.ep = ep

    @classmethod
    def from_cube(cls, cube):
        return cls(cube.eo.copy(), cube.co.copy(), cube.ep.copy())

    def rotate(self, move):
        self.eo.rotate(move)
        self.co.rotate(move)
        self.ep.rotate(move)

    def copy(self):
        return phase1_repr(self.eo.copy(), self.co.copy(), self.ep.copy())

    def coords(self):
        # table indices (edgeorient, cornerorient, medge1)
        return (rc.eo_encode(self.eo), rc.co_encode(self.co),\
                rpd.phase1_medge_encode_opt(self.ep))

    def ok(self):
        mid = self.ep.arr[rc.MEDGE_LO:rc.MEDGE_HI]
        return not self.eo.arr.any() and not self.co.arr.any() and\
            bool(np.all((mid >= rc.MEDGE_LO) & (mid < rc.MEDGE_HI)))


class phase2_repr():

    def __init__(self, ep, cp):
        self.ep = ep
        self.cp = cp

    @classmethod
    def from_cube(cls, cube):
        return cls(cube.ep.copy(), cube.cp.copy())

    def rotate(self, move):
        self.ep.rotate(move)
        self.cp.rotate(move)

    def copy(self):
        return phase2_repr(self.ep.copy(), self.cp.copy())

    def coords(self):
        # table indices (udedge, medge2, cornerperm)
        return (rpd.phase2_udedge_encode(self.ep), rpd.phase2_medge_encode(self.ep),\
                rc.cp_encode(self.cp))

    def ok(self):
        return self.ep.is_identity() and self.cp.is_identity()


class solve_outcome(collections.namedtuple(
        "solve_outcome",
        [
            "found",
            "moves",
            "phase1_moves",
            "phase2_moves",
            "target_length",
            "nodes",
        ],
)):
    __slots__ = ()

    @property
    def length(self):
        return len(self.moves)

    @property
    def within_target(self):
        return self.found and self.length <= self.target_length

    def __str__(self):
        if not self.found:
            return 'No solution found'
        return '{0} ({1:d})'.format(rc.format_moves(self.moves), self.length)


class kociemba_solver():
    """
    Two phase solver.

    tables - prune_tables registry, the process wide default if None
    target_length - first combination at or below this length is accepted
    max_phase1_depth, max_phase2_depth - largest depth bound of each phase
    mode - 'first' stops at the first accepted combination,
           'shortest' keeps searching while a shorter total is possible
    cancel - optional callable, the search stops once it returns True
    phase2_margin - once a combination is known phase 2 only looks for
           phase1 + phase2 lengths up to best length - phase2_margin

    The search runs on the integer table indices.  A move is a lookup in
    the move table stored next to each pruning table, so no cube arrays
    are touched per node.
    """
    def __init__(self, tables=None, target_length=TARGET_LENGTH,\
                 max_phase1_depth=MAX_PHASE1_DEPTH, max_phase2_depth=MAX_PHASE2_DEPTH,\
                 mode=MODE_FIRST, cancel=None, phase2_margin=PHASE2_MARGIN):
        if mode not in (MODE_FIRST, MODE_SHORTEST):
            raise ValueError('Unknown search mode {0!r}'.format(mode))
        if phase2_margin < 1:
            raise ValueError('phase2_margin must be at least 1, got {0!r}'.format(phase2_margin))
        if tables is None:
            tables = rpd.default_tables()
        self.tables = tables
        self.target_length = target_length
        self.max_phase1_depth = max_phase1_depth
        self.max_phase2_depth = max_phase2_depth
        self.mode = mode
        self.cancel = cancel
        self.phase2_margin = phase2_margin
        self.dbLoaded = False
        self.initial = rc.cube_state()
        self.phase1_moves = []
        self.phase2_moves = []
        self.phase2_found = []
        self.best = None
        self.stopped = False
        self.nodes = 0

    def _lists(self, name):
        # plain lists are faster to index than the numpy arrays
        pt = self.tables[name]
        return pt.db.tolist(), pt.mtab.tolist()

    def load_dbs(self):
        if not self.dbLoaded:
            self.edgeorientDB, self.edgeorientMove = self._lists('phase1_edgeorient')
            self.cornerorientDB, self.cornerorientMove = self._lists('phase1_cornerorient')
            self.medge1DB, self.medge1Move = self._lists('phase1_medge')
            self.udedgeDB, self.udedgeMove = self._lists('phase2_udedge')
            self.medge2DB, self.medge2Move = self._lists('phase2_medge')
            self.cornerpermDB, self.cornerpermMove = self._lists('phase2_cornerperm')
            solved = rc.cube_state()
            self.phase1_goal = phase1_repr.from_cube(solved).coords()
            self.phase2_goal = phase2_repr.from_cube(solved).coords()
            self.dbLoaded = True

    def h1(self, eo, co, me):
        return max(self.edgeorientDB[eo], self.cornerorientDB[co], self.medge1DB[me])

    def h2(self, ud, me, cp):
        return max(self.udedgeDB[ud], self.medge2DB[me], self.cornerpermDB[cp])

    def solve(self, cube):
        if not isinstance(cube, rc.cube_state):
            cube = rc.cube_state.from_moves(cube)
        self.load_dbs()
        startts = timer()
        self.initial = cube.copy()
        self.best = None
        self.stopped = False
        self.nodes = 0
        eo, co, me = phase1_repr.from_cube(cube).coords()
        startDepth = self.h1(eo, co, me)
        for depth in range(startDepth, self.max_phase1_depth+1):
            # a phase 1 solution of this length cannot beat what we have
            if self.best is not None and depth >= len(self.best[0]):
                break
            if self.cancelled():
                break
            logger.debug('Phase 1 searching depth %d', depth)
            del self.phase1_moves[:]
            if self.search_phase1(eo, co, me, depth):
                break
        outcome = self.outcome()
        logger.info('%s after %d nodes in %.2f s', outcome, self.nodes, timer()-startts)
        return outcome

    def cancelled(self):
        if self.cancel is not None and self.cancel():
            self.stopped = True
        return self.stopped

    def search_phase1(self, eo, co, me, depth):
        # Returns True when the whole search should stop
        self.nodes = self.nodes + 1
        if (eo, co, me) == self.phase1_goal:
            # Only a solution of exactly this length is new at this bound
            if depth == 0:
                return self.solve_phase2()
            return False
        if depth == 0 or self.cancelled():
            return self.stopped
        if len(self.phase1_moves) > 0:
            lastMove = self.phase1_moves[-1]
        else:
            lastMove = rc.NO_MOVE
        eoRow = self.edgeorientMove[eo]
        coRow = self.cornerorientMove[co]
        meRow = self.medge1Move[me]
        for curMove in rc.next_moves[lastMove]:
            newEo = eoRow[curMove]
            newCo = coRow[curMove]
            newMe = meRow[curMove]
            if self.h1(newEo, newCo, newMe) <= depth - 1:
                self.phase1_moves.append(curMove)
                stop = self.search_phase1(newEo, newCo, newMe, depth - 1)
                self.phase1_moves.pop()
                if stop:
                    return True
        return False

    def solve_phase2(self):
        # phase 2 starts from the cube turned by the phase 1 moves
        repr2 = phase2_repr.from_cube(self.initial)
        for curMove in self.phase1_moves:
            repr2.rotate(curMove)
        ud, me, cp = repr2.coords()
        startDepth = self.h2(ud, me, cp)
        maxDepth = self.max_phase2_depth
        if self.best is not None:
            maxDepth = min(maxDepth,\
                           len(self.best[0]) - len(self.phase1_moves) - self.phase2_margin)
        for depth in range(startDepth, maxDepth+1):
            del self.phase2_moves[:]
            if self.search_phase2(ud, me, cp, depth):
                if self.stopped:
                    return True
                return self.found_combination()
        return False

    def search_phase2(self, ud, me, cp, depth):
        # Returns True on a phase 2 solution or when cancelled
        self.nodes = self.nodes + 1
        if (ud, me, cp) == self.phase2_goal:
            self.phase2_found = list(self.phase2_moves)
            return True
        if depth == 0 or self.cancelled():
            return self.stopped
        if len(self.phase2_moves) > 0:
            lastMove = self.phase2_moves[-1]
        else:
            lastMove = rc.NO_MOVE
        udRow = self.udedgeMove[ud]
        meRow = self.medge2Move[me]
        cpRow = self.cornerpermMove[cp]
        for curMove in phase2_next_moves[lastMove]:
            newUd = udRow[curMove]
            newMe = meRow[curMove]
            newCp = cpRow[curMove]
            if self.h2(newUd, newMe, newCp) <= depth - 1:
                self.phase2_moves.append(curMove)
                found = self.search_phase2(newUd, newMe, newCp, depth - 1)
                self.phase2_moves.pop()
                if found:
                    return True
        return False

    def found_combination(self):
        p1 = list(self.phase1_moves)
        p2 = list(self.phase2_found)
        moves = rc.simplify_moves(p1 + p2)
        if self.best is None or len(moves) < len(self.best[0]):
            self.best = (moves, p1, p2)
            logger.info('Found solution(%d): %s', len(moves), rc.format_moves(moves))
        if self.mode == MODE_FIRST and len(self.best[0]) <= self.target_length:
            return True
        return False

    def outcome(self):
        if self.best is None:
            return solve_outcome(False, [], [], [], self.target_length, self.nodes)
        moves, p1, p2 = self.best
        check = self.initial.copy().apply_moves(moves)
        if not check.is_solved():
            raise AssertionError('Solution {0} does not solve the cube'.format(\
                rc.format_moves(moves)))
        return solve_outcome(True, list(moves), p1, p2, self.target_length, self.nodes)


def solve(moves, **kwargs):
    # Scramble the solved cube with moves then solve it
    return kociemba_solver(**kwargs).solve(rc.cube_state.from_moves(moves))


if __name__ == '__main__':

    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) > 1:
        char_move = ' '.join(sys.argv[1:])
    else:
        char_move = "F2 D L U2 B2 L' B2 L2 R F2 R' D2 R2 F D U2 B D R' U2"
    moves = rc.parse_moves(char_move)
    print('Scramble: {0} ({1:d})'.format(rc.format_moves(moves), len(moves)))

    startts = timer()
    tables = rpd.default_tables().build()
    print('Elapsed time for setup (s) {0:.1f}'.format(timer()-startts))

    bcube = rc.cube_state.from_moves(moves)
    solver = kociemba_solver(tables)
    result = solver.solve(bcube)
    if result.found:
        print('Phase 1: {0}'.format(rc.format_moves(result.phase1_moves)))
        print('Phase 2: {0}'.format(rc.format_moves(result.phase2_moves)))
    print('Solution: {0}'.format(result))
    print('Elapsed time for solution including setup time (s) {0:.1f}'.format(timer()-startts))
