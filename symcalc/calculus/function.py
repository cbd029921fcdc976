r"""@package symcalc.calculus.function

Named functions of one variable with calculus-style numeric operations.

A SymbolicFunction wraps the root of an expression tree (see symcalc.exprs)
together with a display name. Derivatives are computed symbolically and
returned as new SymbolicFunction objects, the wrapped tree is never modified.

@b Examples

```
    f = SymbolicFunction(Exp(Variable()), name='g')
    print(f.derivative())          # g'(x) = (exp(x) * 1)
    print(f.taylor_series(0, 4))   # [1.0, 1.0, 0.5, 0.1666...]
    print(f.integrate(0, 1))       # 1.71828...
```
"""

import os.path as op

import numpy as np
from mpmath import mp

from ..exprs import Expression
from ..exprs.expression import save_to_file, load_from_file, replace_file
from ..numutils import real_converter
from .newton import newton_raphson


__all__ = [
    "SymbolicFunction",
]


class SymbolicFunction(object):
    r"""Function of one variable given by an expression tree and a name.

    The function exclusively owns its expression tree. All operations leave
    it untouched; derivatives are built as new trees.
    """

    def __init__(self, expr, name='f'):
        r"""Create a function from an expression tree.

        Args:
            expr:   Root node of the expression. Ownership passes to the new
                    function object.
            name:   Display name. Derivatives append one ``'`` per order.
                    Default is ``'f'``.
        """
        if not isinstance(expr, Expression):
            raise TypeError("Expected an expression, got %r." % (expr,))
        self._expr = expr
        self._name = name

    @property
    def expression(self):
        r"""Root of the expression tree."""
        return self._expr

    @property
    def name(self):
        r"""Display name of the function."""
        return self._name

    def __repr__(self):
        return "<%s: %s>" % (type(self).__name__, self.str())

    def __str__(self):
        return self.str()

    def str(self):
        r"""Return a string like ``f(x) = (x + 1)``."""
        return "%s(x) = %s" % (self._name, self._expr.str())

    def evaluator(self, use_mp=False):
        r"""Create a callable evaluating the function (see Expression.evaluator())."""
        return self._expr.evaluator(use_mp=use_mp)

    def evaluate(self, x, use_mp=False):
        r"""Evaluate the function at `x`."""
        return self._expr.evaluate(x, use_mp=use_mp)

    def __call__(self, x):
        r"""Evaluate the function at `x` using floating point arithmetics."""
        return self.evaluate(x)

    def clone(self):
        r"""Return an independent copy (deep copy of the expression tree)."""
        return SymbolicFunction(self._expr.clone(), self._name)

    def derivative(self):
        r"""Return the first derivative as new function named e.g. ``f'``."""
        return SymbolicFunction(self._expr.derivative(), self._name + "'")

    def nth_derivative(self, n):
        r"""Return the n'th derivative as new function.

        The expression tree is differentiated `n` times in a loop, so the
        recursion depth does not grow with `n`. The trees themselves do grow
        geometrically with `n`, since derivatives are not simplified.

        @param n
            Non-negative derivative order. For ``n == 0``, a copy of this
            function (with the same name) is returned.

        @b Raises
            `ValueError` if ``n < 0``.
        """
        if n < 0:
            raise ValueError("Derivative order must be non-negative.")
        if n == 0:
            return self.clone()
        expr = self._expr.derivative()
        for _ in range(1, n):
            expr = expr.derivative()
        return SymbolicFunction(expr, self._name + "'" * n)

    def integrate(self, a, b, steps=1000, use_mp=False):
        r"""Approximate the definite integral from `a` to `b`.

        The composite trapezoidal rule is used on `steps` equally sized
        subintervals of width \f$ h = (b-a)/N \f$:
        \f[
            \int_a^b f(x)\,dx \approx h \Big(
                \frac{1}{2} f(a) + \frac{1}{2} f(b)
                + \sum_{i=1}^{N-1} f(a + i h)
            \Big).
        \f]
        There is no adaptive refinement, i.e. the accuracy is controlled only
        through `steps`.

        @b Raises
            `ValueError` if ``steps <= 0``.
        """
        if steps <= 0:
            raise ValueError("Number of steps must be positive.")
        f = self.evaluator(use_mp=use_mp)
        to_real = real_converter(use_mp)
        a, b = to_real(a), to_real(b)
        h = (b - a) / steps
        samples = (f(a + i * h) for i in range(1, steps))
        if use_mp:
            interior = mp.fsum(samples)
        else:
            # no fsum here: overflow and inf - inf yield non-finite values
            interior = sum(samples, to_real(0))
        return h * (0.5 * f(a) + 0.5 * f(b) + interior)

    def limit(self, point, epsilon=1e-6, use_mp=False):
        r"""Probe the function just right of `point`.

        This is a finite-difference probe, not a rigorous limit: it simply
        returns \f$ f(p + \epsilon) \f$. For ``use_mp=True``, the sum is
        formed at the current `mpmath` precision.
        """
        to_real = real_converter(use_mp)
        return self.evaluate(to_real(point) + to_real(epsilon), use_mp=use_mp)

    def taylor_series(self, point, terms, use_mp=False):
        r"""Compute the first Taylor coefficients at `point`.

        Returns a list of the `terms` coefficients
        \f$ a_i = f^{(i)}(p) / i! \f$ for \f$ i = 0, \ldots, N-1 \f$.
        Each iteration differentiates the previous derivative expression once
        (no derivative is built after the last term). An empty list is
        returned for ``terms <= 0``.
        """
        to_real = real_converter(use_mp)
        coeffs = []
        expr = self._expr
        factorial = to_real(1)
        for i in range(terms):
            if i > 0:
                factorial *= i
                expr = expr.derivative()
            coeffs.append(expr.evaluate(point, use_mp=use_mp) / factorial)
        return coeffs

    def series_sum(self, start, end, term):
        r"""Sum ``term(n)`` over the integers `start` to `end` (inclusive).

        This does not involve the function itself. The terms are added up in
        order without compensation, so an overflowing sum results in `inf`.
        An empty range sums to `0.0`.
        """
        # pylint: disable=no-self-use
        return sum((term(n) for n in range(start, end + 1)), 0.0)

    def find_root(self, initial_guess, tolerance=1e-6, max_iterations=100,
                  verbose=False, disp=True, use_mp=False):
        r"""Find a root using Newton-Raphson steps.

        The derivative needed for the steps is computed symbolically once and
        then evaluated numerically in each step. See newton.newton_raphson()
        for a description of the parameters and raised exceptions.
        """
        func = self.evaluator(use_mp=use_mp)
        deriv = self.derivative().evaluator(use_mp=use_mp)
        x0 = real_converter(use_mp)(initial_guess)
        return newton_raphson(func, deriv, x0, tolerance=tolerance,
                              max_iterations=max_iterations, verbose=verbose,
                              disp=disp)

    def tabulate(self, start, end, points):
        r"""Sample the function at equally spaced points.

        Returns a list of `points` pairs ``(x, f(x))`` with the first `x`
        being exactly `start` and the last one exactly `end`, i.e. the step
        is ``(end-start)/(points-1)``.

        @b Raises
            `ValueError` if ``points <= 1``.
        """
        if points <= 1:
            raise ValueError("At least two points are needed for tabulation.")
        f = self.evaluator()
        return [(float(x), float(f(x))) for x in np.linspace(start, end, points)]

    def export_table(self, filename, start, end, points, overwrite=False,
                     verbose=True):
        r"""Write the result of tabulate() to a tab-separated text file.

        The first line is a header ``x<TAB>f(x)`` (using the function's
        name), followed by one line per sample.

        @param overwrite
            Whether to overwrite an existing file with the same name. If
            `False` (default) and such a file exists, a `RuntimeError` is
            raised.
        @param verbose
            Whether to print when the file was written. Default is `True`.
        """
        filename = op.expanduser(filename)
        if op.exists(filename) and not overwrite:
            raise RuntimeError("File already exists.")
        data = np.array(self.tabulate(start, end, points))
        replace_file(
            filename,
            lambda fh: np.savetxt(fh, data, fmt="%.17g", delimiter="\t",
                                  header="x\t%s(x)" % self._name,
                                  comments=""),
            overwrite=overwrite
        )
        if verbose:
            print("Table of %s saved to: %s" % (self._name, filename))

    def save(self, filename, overwrite=False, verbose=True):
        r"""Save the function (name and expression tree) to disk.

        See expression.save_to_file() for the parameters.
        """
        return save_to_file(
            filename, self, overwrite=overwrite, verbose=verbose,
            showname=self.str()
        )

    @classmethod
    def load(cls, filename):
        r"""Static function to load a function object from disk."""
        return load_from_file(filename)
