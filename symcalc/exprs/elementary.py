r"""@package symcalc.exprs.elementary

Elementary functions applied to an arbitrary argument expression.

Each of these nodes represents \f$ f(x) = \phi(g(x)) \f$ for one of the
elementary functions \f$ \phi \in \{\sin, \cos, \exp, \ln\} \f$. The
derivative is built using the chain rule
\f$ f'(x) = \phi'(g(x))\, g'(x) \f$, where the inner derivative is always
kept as an explicit factor, even if \f$ g(x) = x \f$.
"""

from .expression import Expression
from .basics import Constant, Product, Power


__all__ = [
    "Sin",
    "Cos",
    "Exp",
    "Ln",
]


class _ElementaryFunction(Expression):
    r"""Base for elementary functions of one owned argument expression.

    Sub classes set `_name` (used for rendering) and `_ctx_func` (the name of
    the function in `numpy` and `mpmath.mp`).
    """
    _name = None
    _ctx_func = None

    def __init__(self, arg):
        r"""Init function.

        Args:
            arg:    The argument expression. Ownership passes to the new node.
        """
        super(_ElementaryFunction, self).__init__(arg=arg)

    @property
    def arg(self):
        r"""The argument expression."""
        return self.sub_expression('arg')

    def _expr_str(self):
        return "%s(%s)" % (self._name, self.arg.str())

    def _evaluator(self, use_mp):
        func = getattr(self.math_context(use_mp), self._ctx_func)
        g = self.arg._evaluator(use_mp)
        return lambda x: func(g(x))

    def clone(self):
        return type(self)(self.arg.clone())


class Sin(_ElementaryFunction):
    r"""Sine \f$ \sin(g(x)) \f$."""
    _name = _ctx_func = "sin"

    def derivative(self):
        return Product(Cos(self.arg.clone()), self.arg.derivative())


class Cos(_ElementaryFunction):
    r"""Cosine \f$ \cos(g(x)) \f$."""
    _name = _ctx_func = "cos"

    def derivative(self):
        return Product(
            Product(Constant(-1), Sin(self.arg.clone())),
            self.arg.derivative(),
        )


class Exp(_ElementaryFunction):
    r"""Exponential function \f$ e^{g(x)} \f$."""
    _name = _ctx_func = "exp"

    def derivative(self):
        return Product(Exp(self.arg.clone()), self.arg.derivative())


class Ln(_ElementaryFunction):
    r"""Natural logarithm \f$ \ln(g(x)) \f$.

    In floating point mode, the logarithm of zero evaluates to `-inf` and
    that of negative numbers to `nan`. With `use_mp=True`, negative
    arguments produce complex `mpmath.mpc` values instead.
    """
    _name = "ln"
    _ctx_func = "log"

    def derivative(self):
        return Product(self.arg.derivative(), Power(self.arg.clone(), -1))
