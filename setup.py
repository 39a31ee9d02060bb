#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""The setup script.

All metadata exists in setup.cfg. setup.py is only needed to allow
for editable installs when using older versions of pip.


Notes on minimum required versions for dependencies:

numpy: >= 1.20 in order to use numpy.random.default_rng with all keyword arguments in tests
numba: >= 0.49 in order to cache jit-ed functions that release the GIL (nogil=True)
scipy (tests only): >= 1.1 for the bounded L-BFGS-B reference solver used in tests

"""

from setuptools import setup


if __name__ == '__main__':

    setup()
