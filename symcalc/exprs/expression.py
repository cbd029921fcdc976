r"""@package symcalc.exprs.expression

Base of the symbolic expression system.

An expression is an immutable tree of nodes. Composite nodes exclusively own
their sub-expressions, i.e. no node object ever appears twice in a tree or in
two different trees. Each node can

    * evaluate itself numerically at a point `x`,
    * render itself as a fully parenthesized infix string,
    * build a *new* tree representing its derivative w.r.t. `x`, and
    * create a deep, independent copy of itself.

Derivatives are never simplified. Repeated differentiation therefore grows
the trees geometrically, which is accepted behavior.

As with the numeric expression systems this design is modelled after,
evaluation is done by first creating an *evaluator*, i.e. a callable built
once from closures over the evaluators of all sub-expressions. Evaluators
can be configured to either use fast NumPy floating point operations or
slower `mpmath` arbitrary precision operations:

~~~.py
expr = Product(Sin(Variable()), Exp(Variable()))
f = expr.evaluator()
print("f(.5) =", f(.5))
with mp.workdps(30):
    print("f(.5) =", expr.evaluate(mp.mpf('0.5'), use_mp=True))
~~~

Evaluation, differentiation and cloning are recursive, so the Python stack
depth needed is proportional to the depth of the tree.
"""

from abc import ABCMeta, abstractmethod
import os
import os.path as op
from tempfile import NamedTemporaryFile

import numpy as np
from mpmath import mp

from ..numutils import real_converter


__all__ = [
    "Expression",
    "replace_file",
    "save_to_file",
    "load_from_file",
]


def replace_file(filename, write, overwrite=False):
    r"""Write a file through a temporary file renamed into place.

    Any failure during writing leaves an existing file untouched. The
    temporary file is created in the target directory so that the final
    `os.replace()` does not cross file system boundaries.

    @param filename
        Destination file name.
    @param write
        Callable taking an open binary file object and writing the content.
    @param overwrite
        Whether to overwrite an existing file with the same name. If `False`
        (default) and such a file exists, a `RuntimeError` is raised. This is
        checked again after writing, but is not completely atomic.
    """
    if op.exists(filename) and not overwrite:
        raise RuntimeError("File already exists.")
    path = op.dirname(op.abspath(filename))
    tname = None
    try:
        with NamedTemporaryFile(dir=path, delete=False) as tfile:
            tname = tfile.name
            write(tfile)
        if op.exists(filename) and not overwrite:
            raise RuntimeError("File already exists.")
        os.replace(tname, filename)
    finally:
        if tname is not None:
            try:
                os.unlink(tname) # clean up after any failures
            except FileNotFoundError:
                pass


def save_to_file(filename, data, overwrite=False, verbose=True,
                 showname='data', mkpath=True):
    r"""Save an object to disk.

    This uses `numpy.save()` to store an object in a file. Use
    load_from_file() to restore the data afterwards.

    This operation is atomic for ``overwrite=True``, i.e. any failure during
    saving (e.g. data that cannot be pickled) leaves the original file
    untouched. See replace_file().

    @param filename
        The file name to store the data in. An extension ``'.npy'`` will be
        added if not already there.
    @param overwrite
        Whether to overwrite an existing file with the same name. If `False`
        (default) and such a file exists, a `RuntimeError` is raised.
    @param verbose
        Whether to print when the file was written. Default is `True`.
    @param showname
        Name to print in the confirmation message in case `verbose==True`.
    @param mkpath
        Whether to create missing parent directories. Default is `True`.

    @b Notes

    The data will be put into a 1-element list to avoid creating 0-dimensional
    numpy arrays.
    """
    filename = op.expanduser(filename)
    if not filename.endswith('.npy'):
        filename += '.npy'
    if mkpath:
        os.makedirs(op.normpath(op.dirname(op.abspath(filename))), exist_ok=True)
    replace_file(
        filename, lambda fh: np.save(fh, np.array([data], dtype=object)),
        overwrite=overwrite
    )
    if verbose:
        print("%s saved to: %s" % (showname, filename))
    return filename


def load_from_file(filename):
    r"""Load an object from disk.

    If the object had been stored using save_to_file(), the result should be a
    perfect copy of the object.

    @b Notes

    This assumes the object is the only element of a list stored in the file,
    which will be the case if the file was created using save_to_file(). If
    the data is not a single-element list, it is returned as is.
    """
    filename = op.expanduser(filename)
    result = np.load(filename, allow_pickle=True)
    if result.shape == (1,):
        return result[0]
    # Not a single value. Return as is.
    return result


class Expression(metaclass=ABCMeta):
    r"""Parent class of all expression nodes.

    The set of node types is closed, see exprs.EXPRESSION_TYPES. Each of them
    implements:
        * _expr_str() returning the infix rendering of the node
        * _evaluator() creating a callable evaluating the node
        * derivative() building the derivative tree
        * clone() building a deep copy
    """

    def __init__(self, **sub_exprs):
        r"""Base class init for expression nodes.

        The ``**sub_exprs`` sub expressions given as keyword arguments here
        are owned by this node from now on. They are used when traversing
        through a complete expression tree in e.g. print_tree() or
        traverse_tree(). Plain numbers are converted to `Constant` nodes.
        """
        self.__sub_expressions = dict(
            (k, self.__ensure_expr(e)) for k, e in sub_exprs.items()
        )

    def sub_expression(self, key):
        r"""Return the sub-expression stored under the given key."""
        return self.__sub_expressions[key]

    def sub_expressions(self):
        r"""Return a list of ``(key, expression)`` pairs of direct children."""
        return list(self.__sub_expressions.items())

    def __ensure_expr(self, expr):
        r"""Ensure an object is an expression, converting it if necessary."""
        if isinstance(expr, Expression):
            return expr
        from .basics import Constant
        return Constant(expr)

    def traverse_tree(self, include_root=False, parents=None):
        r"""Generator that walks through a complete expression tree.

        In each iteration, the returned values represent the current node's
        parents (as a list from root to immediate parent), its key under which
        it is stored in its parent, and the node itself.

        Args:
            include_root: Whether to include the root as first item. Default
                is `False`.
            parents: Optional list of parents of the root. Normally only used
                internally for the recursion.

        @b Examples
        \code
            for parents, name, expr in root_expr.traverse_tree():
                print("-"*len(parents), name)
        \endcode
        """
        if parents is None:
            parents = []
        if include_root:
            yield parents, "", self
        parents = parents + [self]
        for name, expr in self.__sub_expressions.items():
            yield parents, name, expr
            for node in expr.traverse_tree(include_root=False,
                                           parents=parents):
                yield node

    def print_tree(self, root_name='root'):
        r"""Print the whole expression tree.

        Each node is printed on its own line with its key under which it is
        stored in its parent, its class name, and the rendering of the
        subtree rooted at it.
        """
        for parents, name, expr in self.traverse_tree(include_root=True):
            print("%s%s <%s> %s" % (
                ". " * len(parents), name or root_name, type(expr).__name__,
                expr.str()
            ))

    def node_count(self):
        r"""Number of nodes in this tree (including the root)."""
        return 1 + sum(1 for _ in self.traverse_tree())

    def save(self, filename, overwrite=False, verbose=True):
        r"""Save the expression tree to disk.

        Args:
            filename: The file name to store the data in. An extension
                ``'.npy'`` will be added if not already there.
            overwrite: Whether to overwrite an existing file with the same
                name. If `False` (default) and such a file exists, a
                `RuntimeError` is raised.
            verbose: Whether to print when the file was written. Default is
                `True`.
        """
        return save_to_file(
            filename, self, overwrite=overwrite, verbose=verbose,
            showname="%s [%s]" % (self.str(), type(self).__name__)
        )

    @classmethod
    def load(cls, filename):
        r"""Static function to load an expression tree from disk."""
        return load_from_file(filename)

    def __repr__(self):
        return "<%s(%s)>" % (type(self).__name__, self.str())

    def __str__(self):
        return self.str()

    def str(self):
        r"""Return the fully parenthesized infix rendering of the expression.

        The rendering is deterministic and never simplified, e.g. a sum
        ``0 + x`` is rendered as ``(0 + x)``.
        """
        return self._expr_str()

    @classmethod
    def math_context(cls, use_mp):
        r"""Return the module providing the elementary functions.

        This is `mpmath.mp` if `use_mp` is `True` and `numpy` otherwise. Both
        provide `sin`, `cos`, `exp`, `log` and `power` with compatible
        signatures. The NumPy functions follow IEEE semantics, e.g.
        ``log(0) == -inf`` and ``log(-1)`` is `nan` (with a `RuntimeWarning`).
        """
        return mp if use_mp else np

    def evaluator(self, use_mp=False):
        r"""Create an evaluator for the expression.

        The returned callable takes one argument `x` and returns the value of
        the expression at `x`. The closures representing the tree are built
        only once, so this is the preferred way when evaluating the same
        expression at many points.

        Args:
            use_mp: Boolean indicating whether the evaluator should use
                `mpmath` math operations (at the current `mp.dps` precision)
                or NumPy floating point operations. In the latter case, `x`
                may also be a NumPy array. Default is `False`.
        """
        f = self._evaluator(use_mp)
        to_real = real_converter(use_mp)
        def evaluate(x):
            return f(to_real(x))
        return evaluate

    def evaluate(self, x, use_mp=False):
        r"""Evaluate the expression at a point `x`.

        Non-finite results (e.g. of the logarithm of non-positive numbers)
        are returned as such and not raised. See evaluator() for the meaning
        of `use_mp`.
        """
        return self.evaluator(use_mp=use_mp)(x)

    @abstractmethod
    def _expr_str(self):
        r"""String rendering of this node.

        Sub-expressions should be rendered using their `str` method.
        """
        pass

    @abstractmethod
    def _evaluator(self, use_mp):
        r"""Create a callable of one (already converted) argument.

        Composite nodes create the callables of their sub-expressions here
        (via their `_evaluator` method) and combine them using the functions
        of `math_context(use_mp)`.
        """
        pass

    @abstractmethod
    def derivative(self):
        r"""Return a new tree representing the derivative w.r.t. `x`.

        The result never shares any node with this tree. Any part of this
        tree reused in the derivative is cloned.
        """
        pass

    @abstractmethod
    def clone(self):
        r"""Return a deep copy of this tree."""
        pass
