"""JIT decorators for the numeric kernels.

Set NO_NUMBA in the environment to run the kernels as plain python (handy for debugging and coverage).
"""
__author__ = 'Alex Pyattaev'
import functools
import os

import numba

numba_enabled = 'NO_NUMBA' not in os.environ

if numba_enabled:
    jit_hardcore = functools.partial(numba.jit, nopython=True, nogil=True, cache=True)
else:
    print("Numba disabled by environment variable")

    # noinspection PyUnusedLocal
    def jit_hardcore(f, *args, **kwargs):
        return f
