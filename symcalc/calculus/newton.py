r"""@package symcalc.calculus.newton

Newton-Raphson root finding for functions of one variable.

The high-level function newton_raphson() takes the function and its
derivative as callables. The iteration is

\f[
    x_{k+1} = x_k - \frac{f(x_k)}{f'(x_k)},
\f]

stopped as soon as \f$ |x_{k+1} - x_k| \f$ drops below the tolerance, in
which case \f$ x_{k+1} \f$ is returned.

@b Examples

```
    x0 = newton_raphson(lambda x: x**2 - 4, lambda x: 2*x, 3.0)
```
"""

from ..numutils import NumericalError


__all__ = [
    "newton_raphson",
    "NewtonRaphson",
    "NoConvergence",
    "StepLimitExceeded",
    "DegenerateDerivative",
]


class NoConvergence(Exception):
    r"""Base for exceptions indicating failed convergence of Newton steps."""
    pass


class StepLimitExceeded(NoConvergence):
    r"""Raised when convergence not achieved within the step count limit."""
    pass


class DegenerateDerivative(NumericalError):
    r"""Raised when a Newton step would divide by a (nearly) vanishing derivative."""
    pass


def newton_raphson(func, deriv, initial_guess, tolerance=1e-6,
                   max_iterations=100, verbose=False, disp=True):
    r"""Find a root of a function using Newton-Raphson steps.

    @param func
        Callable evaluating the function.
    @param deriv
        Callable evaluating the derivative of `func`.
    @param initial_guess
        Starting point of the iteration.
    @param tolerance
        (float, optional)
        Steps smaller than this (in absolute value) are considered converged.
        The same value is used as threshold below which the derivative is
        considered to vanish. Default is `1e-6`.
    @param max_iterations
        (int, optional)
        Maximum number of Newton steps to take. Default is `100`.
    @param verbose
        Whether to print status information during the Newton search. Default
        is `False`.
    @param disp
        Whether to raise StepLimitExceeded when the desired tolerance could
        not be reached in the number of steps. If `False`, the last iterate is
        returned instead. Default is `True`.

    @return The first iterate \f$ x_{k+1} \f$ closer than `tolerance` to its
        predecessor.

    @b Raises
        DegenerateDerivative if \f$ |f'(x_k)| \f$ falls below `tolerance`;
        StepLimitExceeded if `max_iterations` steps did not converge (and
        `disp` is `True`).
    """
    solver = NewtonRaphson(tolerance=tolerance, max_iterations=max_iterations,
                           verbose=verbose)
    solver.disp = disp
    return solver.solve(func, deriv, initial_guess)


class NewtonRaphson(object):
    r"""Class implementing the Newton-Raphson steps.

    After constructing a NewtonRaphson object, configure it using its public
    instance attributes. Then, call solve() to perform the search.

    The docstring of newton_raphson() describes the parameters.
    """

    __slots__ = ("tolerance", "max_iterations", "verbose", "disp")

    def __init__(self, tolerance=1e-6, max_iterations=100, verbose=False):
        r"""Create a Newton-Raphson solver object.

        Most of the configuration of the method is done via public instance
        variables. Since the class uses ``__slots__``, there is no chance that
        typos in these attributes go by undetected.
        """
        ## Step size (and derivative magnitude) threshold.
        self.tolerance = tolerance
        ## Maximum number of Newton steps to take.
        self.max_iterations = max_iterations
        ## Whether to print status information during the Newton search.
        self.verbose = verbose
        ## Whether to raise StepLimitExceeded if no convergence is reached.
        self.disp = True

    def _p(self, msg):
        r"""Print the given message in case we're verbose."""
        if self.verbose:
            print(msg)

    def solve(self, func, deriv, initial_guess):
        r"""Perform the Newton-Raphson iteration starting at `initial_guess`."""
        tol = self.tolerance
        x = initial_guess
        for i in range(self.max_iterations):
            fx = func(x)
            dfx = deriv(x)
            if abs(dfx) < tol:
                raise DegenerateDerivative(
                    "Derivative too small at x = %s (|f'(x)| = %s)."
                    % (x, abs(dfx))
                )
            x_new = x - fx / dfx
            self._p("Newton step %d: x = %s, f(x) = %s, f'(x) = %s"
                    % (i+1, x_new, fx, dfx))
            if abs(x_new - x) < tol:
                self._p("Converged after %d steps." % (i+1))
                return x_new
            x = x_new
        msg = ("Root finding did not converge within %d steps (last x = %s)."
               % (self.max_iterations, x))
        if self.disp:
            raise StepLimitExceeded(msg)
        self._p(msg)
        return x
