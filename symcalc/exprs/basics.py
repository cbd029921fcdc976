r"""@package symcalc.exprs.basics

Constants, the variable and the arithmetic expression nodes.
"""

from .expression import Expression
from ..numutils import real_converter


__all__ = [
    "Constant",
    "Variable",
    "Sum",
    "Product",
    "Power",
]


class Constant(Expression):
    r"""Represent an expression that is a constant.

    Represents an expression of the form \f$ f(x) = c = \mathrm{const} \f$.

    The value of the constant can be accessed through the `value` property.
    """

    def __init__(self, value=0):
        r"""Init function.

        Args:
            value:  The constant value. It is rendered exactly as Python
                    converts it to a string, i.e. ``Constant(2)`` renders as
                    ``2`` and ``Constant(2.0)`` as ``2.0``.
        """
        super(Constant, self).__init__()
        self.__value = value

    @property
    def value(self):
        r"""The constant value this expression represents."""
        return self.__value

    def _expr_str(self):
        return "%s" % (self.__value,)

    def _evaluator(self, use_mp):
        c = real_converter(use_mp)(self.__value)
        return lambda x: c

    def derivative(self):
        return Constant(0)

    def clone(self):
        return Constant(self.__value)


class Variable(Expression):
    r"""The independent variable \f$ f(x) = x \f$."""

    def _expr_str(self):
        return "x"

    def _evaluator(self, use_mp):
        return lambda x: x

    def derivative(self):
        return Constant(1)

    def clone(self):
        return Variable()


class _BinaryOperation(Expression):
    r"""Base for nodes combining two owned sub-expressions."""

    ## Operator symbol used when rendering.
    _symbol = None

    def __init__(self, left, right):
        r"""Init function.

        Args:
            left:   First operand. Ownership passes to the new node.
            right:  Second operand. Ownership passes to the new node.
        """
        super(_BinaryOperation, self).__init__(left=left, right=right)

    @property
    def left(self):
        r"""First operand."""
        return self.sub_expression('left')

    @property
    def right(self):
        r"""Second operand."""
        return self.sub_expression('right')

    def _expr_str(self):
        return "(%s %s %s)" % (self.left.str(), self._symbol, self.right.str())

    def clone(self):
        return type(self)(self.left.clone(), self.right.clone())


class Sum(_BinaryOperation):
    r"""Sum of two expressions.

    Represents an expression of the form \f$ f(x) = g(x) + h(x) \f$.
    """
    _symbol = "+"

    def _evaluator(self, use_mp):
        e1 = self.left._evaluator(use_mp)
        e2 = self.right._evaluator(use_mp)
        return lambda x: e1(x) + e2(x)

    def derivative(self):
        return Sum(self.left.derivative(), self.right.derivative())


class Product(_BinaryOperation):
    r"""Multiply two expressions.

    Represents an expression of the form \f$ f(x) = g(x) h(x) \f$.

    The derivative is built using the product rule
    \f$ (gh)' = g'h + gh' \f$ without any simplification.
    """
    _symbol = "*"

    def _evaluator(self, use_mp):
        e1 = self.left._evaluator(use_mp)
        e2 = self.right._evaluator(use_mp)
        return lambda x: e1(x) * e2(x)

    def derivative(self):
        return Sum(
            Product(self.left.derivative(), self.right.clone()),
            Product(self.left.clone(), self.right.derivative()),
        )


class Power(Expression):
    r"""Expression raised to a constant real power.

    Represents an expression of the form \f$ f(x) = g(x)^n \f$ with a fixed
    exponent \f$ n \f$. Variable exponents are not supported.

    The derivative uses the general power rule combined with the chain rule,
    \f$ (g^n)' = n g^{n-1} g' \f$, for any base expression \f$ g \f$.
    """

    def __init__(self, base, exponent):
        r"""Init function.

        Args:
            base:   The base expression. Ownership passes to the new node.
            exponent: The constant (real) exponent.
        """
        super(Power, self).__init__(base=base)
        self.__exponent = exponent

    @property
    def base(self):
        r"""The base expression."""
        return self.sub_expression('base')

    @property
    def exponent(self):
        r"""The constant exponent."""
        return self.__exponent

    def _expr_str(self):
        return "(%s)^%s" % (self.base.str(), self.__exponent)

    def _evaluator(self, use_mp):
        power = self.math_context(use_mp).power
        n = real_converter(use_mp)(self.__exponent)
        b = self.base._evaluator(use_mp)
        return lambda x: power(b(x), n)

    def derivative(self):
        n = self.__exponent
        return Product(
            Product(Constant(n), Power(self.base.clone(), n - 1)),
            self.base.derivative(),
        )

    def clone(self):
        return Power(self.base.clone(), self.__exponent)
