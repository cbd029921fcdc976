r"""@package symcalc.exprs

Expression system for building functions of one variable as trees and
evaluating and differentiating them symbolically.

Each expression is one node of a tree. Leaves are constants and the
variable \f$ x \f$, inner nodes are sums, products, constant powers and the
elementary functions \f$ \sin \f$, \f$ \cos \f$, \f$ \exp \f$ and
\f$ \ln \f$ of an argument expression. The node types form a closed set
listed in #EXPRESSION_TYPES; code dispatching over node types may rely on it
being exhaustive.

By implementing the derivative of each node in terms of derivatives of its
sub-expressions (sum, product and chain rules), derivative trees of
arbitrary expressions can be constructed. These trees are not simplified.

All expressions are *picklable*, which means they can easily be stored to
disk and retrieved later. The expression.Expression class has a convenience
method expression.Expression.save() for this purpose.
"""

from .expression import Expression
from .basics import Constant, Variable, Sum, Product, Power
from .elementary import Sin, Cos, Exp, Ln


## All concrete expression node types.
EXPRESSION_TYPES = (Constant, Variable, Sum, Product, Power, Sin, Cos, Exp, Ln)
