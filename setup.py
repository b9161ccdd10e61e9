#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Thu Dec  3 13:37:26 2020

@author: cjburke
Install the two phase cube solver modules
pip install -e .
pip install -e .[test]  for running the tests with pytest
"""

from setuptools import setup

setup(
        name="rubik_kociemba",
        version="0.1.0",
        description="Two phase (Kociemba) 3x3x3 cube solver with numpy pruning tables",
        py_modules=[
                "lehmer_code",
                "rubik_cube",
                "rubik_prune_db",
                "rubik_kociemba_solve",
        ],
        python_requires=">=3.8",
        install_requires=["numpy"],
        extras_require={"test": ["pytest"]},
)
