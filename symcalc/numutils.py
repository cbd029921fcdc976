r"""@package symcalc.numutils

Miscellaneous numerical utilities and helpers.


@b Examples

```
    >>> to_real = real_converter(use_mp=False)
    >>> to_real([0, 1])
    array([0., 1.])
```
"""

import numpy as np
from mpmath import mp


__all__ = [
    "NumericalError",
    "real_converter",
]


class NumericalError(Exception):
    r"""Exception raised for problems with numerical evaluation.

    For example, an iterative method may raise this (or a subclass) if a
    step would require dividing by a (nearly) vanishing quantity.
    """
    pass


def _to_float(x):
    r"""Convert a scalar or array-like to `float64` values.

    Scalars are returned as NumPy scalars (not 0-dimensional arrays).
    """
    x = np.asarray(x, dtype=float)
    if x.ndim == 0:
        return x[()]
    return x


def real_converter(use_mp):
    r"""Return a callable converting values to the real type of a context.

    @param use_mp
        If `True`, values are converted to `mpmath.mpf` at the current
        precision. Otherwise they are converted to NumPy `float64` scalars
        (or arrays, if an array-like is given).
    """
    if use_mp:
        return mp.mpf
    return _to_float
