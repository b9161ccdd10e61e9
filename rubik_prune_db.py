#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Nov 23 19:46:24 2020

@author: cjburke
Build the pruning databases for the two phase solver.
Each database stores the min number of moves needed to bring one
coordinate back to its solved value using only the allowed moves.
The databases come from a breadth first search run to exhaustion
starting at the solved coordinate.  Since the allowed moves always
contain their own inverse, the distance out from solved is the same
as the distance back to solved.
Next to the distances each table keeps a move table,
mtab[index, move] -> index after the move, so the solver can turn the
coordinates without touching cube arrays.

  phase1_edgeorient    2048  all moves
  phase1_cornerorient  2187  all moves
  phase1_medge          495  all moves
  phase2_udedge       40320  U D quarter turns, R L F B half turns
  phase2_medge           24  R L F B half turns
  phase2_cornerperm   40320  U D quarter turns, R L F B half turns
"""

import collections
import logging
import os
import threading
from collections import deque as dq
from timeit import default_timer as timer

import numpy as np

import lehmer_code as lc
import rubik_cube as rc

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# env variable naming a directory holding saved databases
PRUNE_DB_DIR_ENV = 'RUBIK_PRUNE_DB_DIR'


class incomplete_table(RuntimeError):
    pass


# some special encoders
def phase1_medge_encode(ep):
    # slots holding the 4 middle layer edges, 12 choose 4
    buf = [i for i, v in enumerate(ep.arr.tolist()) if rc.MEDGE_LO <= v < rc.MEDGE_HI]
    return lc.encode_comb(buf, 12)


def phase1_medge_encode_opt(ep):
    occupied = [rc.MEDGE_LO <= v < rc.MEDGE_HI for v in ep.arr.tolist()]
    return lc.encode_comb_opt(occupied, 4)


def phase2_medge_encode(ep):
    # order of the middle layer edges within the middle layer, 4!
    return lc.encode_perm([v - rc.MEDGE_LO for v in ep.arr[rc.MEDGE_LO:rc.MEDGE_HI].tolist()])


def phase2_udedge_encode(ep):
    # order of the U and D layer edges within those layers, 8!
    # labels 8-11 are renumbered 4-7
    vals = ep.arr.tolist()
    buf = [v if v < 4 else v - 4 for v in vals[0:4] + vals[8:12]]
    return lc.encode_perm(buf)


def build_move_table(encoder, initial_states, size, moves):
    # Walk every coordinate value reachable with moves and record where
    #  each move takes it.  Moves not in the list are left at -1
    mtab = np.full((size, rc.NMOVES), -1, dtype=np.int32)
    seen = set()
    nlist = dq([])
    for s in initial_states:
        idx = encoder(s)
        if idx not in seen:
            seen.add(idx)
            nlist.append((s, idx))
    while len(nlist) > 0:
        curState, idx = nlist.popleft()
        row = mtab[idx]
        for curMove in moves:
            newState = curState.copy()
            newState.rotate(curMove)
            newIdx = encoder(newState)
            row[curMove] = newIdx
            if newIdx not in seen:
                seen.add(newIdx)
                nlist.append((newState, newIdx))
    return mtab


class prune_table():

    def __init__(self, size, name=''):
        self.name = name
        self.db = np.full((size,), -1, dtype=np.int8)
        self.mtab = np.full((size, rc.NMOVES), -1, dtype=np.int32)

    def __len__(self):
        return len(self.db)

    def __getitem__(self, idx):
        return self.db[idx]

    def init(self, encoder, initial_states, valid_moves, coord_moves=None):
        # valid_moves - moves the distances are counted with
        # coord_moves - moves the move table covers, valid_moves if None
        startts = timer()
        if coord_moves is None:
            coord_moves = valid_moves
        tableMoves = sorted(set(valid_moves) | set(coord_moves))
        self.mtab = build_move_table(encoder, initial_states, len(self.db), tableMoves)
        logger.debug('%s move table done %.1f s', self.name, timer()-startts)

        # run the BFS to exhaustion on the indices to record
        #  min number of moves needed to reach every index
        mtab = self.mtab.tolist()
        db = [-1] * len(self.db)
        nlist = dq([])
        for s in initial_states:
            idx = encoder(s)
            db[idx] = 0
            for curMove in valid_moves:
                nlist.append((mtab[idx][curMove], 1, curMove))
        allowed = set(valid_moves)
        validNext = {m: [c for c in rc.next_moves[m] if c in allowed] for m in valid_moves}

        nVisit = 0
        lastLevel = 1
        while len(nlist) > 0:
            idx, curLevel, curLastMove = nlist.popleft()
            if curLevel != lastLevel:
                logger.debug('%s level %d queue length %d', self.name, curLevel, len(nlist))
                lastLevel = curLevel
            prev = db[idx]
            if prev == -1 or prev > curLevel:
                db[idx] = curLevel
                nVisit = nVisit + 1
                row = mtab[idx]
                for curMove in validNext[curLastMove]:
                    nlist.append((row[curMove], curLevel+1, curMove))
        self.db[:] = db

        self.check_complete()
        logger.info('Built %s table: %d entries, %d expanded, max depth %d, %.1f s',\
                    self.name, len(self.db), nVisit, self.max_depth(), timer()-startts)
        return self

    def check_complete(self):
        nMiss = int(np.sum(self.db == -1))
        if nMiss > 0:
            raise incomplete_table('{0} table has {1:d} of {2:d} entries unvisited'.format(\
                self.name, nMiss, len(self.db)))

    def max_depth(self):
        return int(np.max(self.db))

    def depth_counts(self):
        # number of entries at each depth 0..max_depth
        return np.bincount(self.db[self.db >= 0]).tolist()

    def save_db(self, outfile):
        np.savez_compressed(outfile, db=self.db, mtab=self.mtab, name=self.name)

    @classmethod
    def load_db(cls, infile, size=None, name=None):
        with np.load(infile) as data:
            if 'mtab' not in data.files:
                raise ValueError('{0} has no move table, rebuild it'.format(infile))
            arr = data['db']
            mtab = data['mtab']
            if name is None:
                name = str(data['name']) if 'name' in data.files else ''
        if size is not None and len(arr) != size:
            raise ValueError('{0} holds {1:d} entries, expected {2:d}'.format(\
                infile, len(arr), size))
        if mtab.shape != (len(arr), rc.NMOVES):
            raise ValueError('{0} move table has shape {1}, expected ({2:d}, {3:d})'.format(\
                infile, mtab.shape, len(arr), rc.NMOVES))
        pt = cls(len(arr), name)
        pt.db[:] = arr
        pt.mtab[:] = mtab
        pt.check_complete()
        return pt


table_spec = collections.namedtuple(
    "table_spec",
    [
        "name",
        "size",
        "encoder",
        "seed",
        "moves",
        "coord_moves",
    ],
    defaults=[None],
)

# phase2_medge distances only count R L F B half turns but the solver
#  also needs to follow it through U and D turns
DEFAULT_SPECS = (
    table_spec("phase1_edgeorient", 2048, rc.eo_encode, rc.edge_orient, rc.ALL_MOVES),
    table_spec("phase1_cornerorient", 2187, rc.co_encode, rc.corner_orient, rc.ALL_MOVES),
    table_spec("phase1_medge", 495, phase1_medge_encode_opt, rc.edge_perm, rc.ALL_MOVES),
    table_spec("phase2_udedge", 40320, phase2_udedge_encode, rc.edge_perm, rc.PHASE2_MOVES),
    table_spec("phase2_medge", 24, phase2_medge_encode, rc.edge_perm, rc.PHASE2_MEDGE_MOVES,\
               rc.PHASE2_MOVES),
    table_spec("phase2_cornerperm", 40320, rc.cp_encode, rc.corner_perm, rc.PHASE2_MOVES),
)


def build_table(spec):
    pt = prune_table(spec.size, spec.name)
    return pt.init(spec.encoder, [spec.seed()], spec.moves, spec.coord_moves)


class prune_tables():
    """
    Set of pruning tables built together on first use and read only after.
    Tables are looked up by name.  With a cache_dir each table is loaded
    from <cache_dir>/<name>.npz when present and saved there after a build.
    """
    def __init__(self, specs=DEFAULT_SPECS, cache_dir=None):
        self.specs = tuple(specs)
        self.cache_dir = cache_dir
        self._tables = None
        self._lock = threading.Lock()

    def names(self):
        return [spec.name for spec in self.specs]

    @property
    def built(self):
        return self._tables is not None

    def build(self):
        if self._tables is None:
            with self._lock:
                if self._tables is None:
                    tables = {}
                    for spec in self.specs:
                        tables[spec.name] = self._load_or_build(spec)
                    self._tables = tables
        return self

    def _cache_file(self, spec):
        return os.path.join(self.cache_dir, '{0}.npz'.format(spec.name))

    def _load_or_build(self, spec):
        if self.cache_dir is None:
            return build_table(spec)
        cacheFile = self._cache_file(spec)
        if os.path.exists(cacheFile):
            logger.info('Loading %s table from %s', spec.name, cacheFile)
            return prune_table.load_db(cacheFile, spec.size, spec.name)
        pt = build_table(spec)
        os.makedirs(self.cache_dir, exist_ok=True)
        pt.save_db(cacheFile)
        logger.info('Saved %s table to %s', spec.name, cacheFile)
        return pt

    def get(self, name):
        self.build()
        return self._tables[name]

    def __getitem__(self, name):
        return self.get(name)

    def __contains__(self, name):
        return name in self.names()


_default_tables = None
_default_lock = threading.Lock()


def default_tables():
    # process wide registry with the six solver tables
    global _default_tables
    if _default_tables is None:
        with _default_lock:
            if _default_tables is None:
                _default_tables = prune_tables(cache_dir=os.environ.get(PRUNE_DB_DIR_ENV))
    return _default_tables


if __name__ == '__main__':

    logging.basicConfig(level=logging.INFO)
    outdir = os.environ.get(PRUNE_DB_DIR_ENV, 'rubik_prune_db')
    startts = timer()
    tables = prune_tables(cache_dir=outdir).build()
    for name in tables.names():
        pt = tables[name]
        print('{0} size: {1:d} max depth: {2:d}'.format(name, len(pt), pt.max_depth()))
        print(pt.depth_counts())
    print('Done. Elapsed time (s) {0:.1f}'.format(timer()-startts))
