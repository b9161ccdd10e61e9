#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Nov 30 18:53:52 2020

@author: cjburke
Index codes for the cube coordinates.
  encode_perm - lehmer code (factorial number system) of a permutation
  encode_comb - combinatorial number system index of a 4 item subset
Every pruning table is indexed with these so the same function has
to be used when the table is built and when it is looked up.
Based on Ben Botto Blog post
https://medium.com/@benjamin.botto/implementing-an-optimal-rubiks-cube-solver-using-korf-s-algorithm-bf750b332cf9
See that for inspiration
"""
import math
import numpy as np

MAXN = 12
MAXK = 4

# factorials 0! ... 12!
useFacts = np.array([math.factorial(i) for i in range(MAXN+1)], dtype=np.int64)
# n choose k table for n <= 12 and k < 4
useCombs = np.array([[math.comb(n, k) for k in range(MAXK)] for n in range(MAXN+1)],\
                    dtype=np.int64)
# plain int copies for the inner loops
_facts = useFacts.tolist()
_combs = useCombs.tolist()


def encode_perm(p):
    # p [sequence] - permutation of 0..n-1 with n <= 12
    # Returns unique index in [0, n!)
    n = len(p)
    if n > MAXN:
        raise ValueError('lehmer code cannot handle n > {0:d}'.format(MAXN))
    # mapped is value -> rank among values not used yet
    # index is rank -> value
    mapped = list(range(n))
    index = list(range(n))
    res = 0
    for i in range(n-1, -1, -1):
        k = mapped[p[i]]
        res = res + _facts[i] * k
        # move the value holding the highest remaining rank into the freed rank
        idx = index[i]
        mapped[idx] = k
        index[k] = idx
    return res


def encode_comb(p, n):
    # p [sequence] - selected indices out of range(n), any order
    # Returns unique index in [0, C(n, len(p)))
    occupied = [False] * n
    for i in p:
        occupied[i] = True
    return encode_comb_opt(occupied, len(p))


def encode_comb_opt(occupied, k):
    # occupied [sequence of bool] - presence flag for each of the n indices
    # k [int] - number of flags set
    res = 0
    for i in range(len(occupied)-1, -1, -1):
        if occupied[i]:
            k = k - 1
        else:
            res = res + _combs[i][k-1]
        if k == 0:
            break
    return res


if __name__ == '__main__':

    lcidx = encode_perm([7,6,5,4,3,2,1,0])
    print(lcidx)

    lcidx = encode_comb([3,6,9,11], 12)
    print(lcidx)
