r"""@package symcalc

Symbolic calculus toolkit for functions of one real variable.

Expressions are built programmatically as trees out of the node classes in
the symcalc.exprs package (constants, the variable \f$ x \f$, sums,
products, constant powers and the elementary functions \f$ \sin \f$,
\f$ \cos \f$, \f$ \exp \f$ and \f$ \ln \f$). Each node knows how to evaluate
itself and how to produce a new tree representing its derivative.

The symcalc.calculus package wraps such a tree into a named
calculus.function.SymbolicFunction offering higher derivatives, numerical
integration, Taylor coefficients, Newton-Raphson root finding and
tabulation.

@b Examples

```
    from symcalc.exprs import Variable, Power, Constant, Sum
    from symcalc.calculus import SymbolicFunction

    f = SymbolicFunction(Sum(Power(Variable(), 2), Constant(-4)))
    print(f)                   # f(x) = ((x)^2 + -4)
    print(f.find_root(3.0))    # 2.0000000000...
```
"""
