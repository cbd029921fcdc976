r"""@package symcalc.calculus

Calculus operations on functions given by symbolic expression trees.

The main class is function.SymbolicFunction, which offers symbolic higher
derivatives and numeric integration, Taylor coefficients, root finding (via
the newton module) and tabulation.
"""

from .function import SymbolicFunction
from .newton import newton_raphson, NewtonRaphson
from .newton import NoConvergence, StepLimitExceeded, DegenerateDerivative
