#!/usr/bin/env python3
r"""@package symcalc.calculus.test_function

SymbolicFunction test suite.

SciPy is used as independent reference for integrals and roots.
"""

import unittest
import sys
import math
import os
import os.path as op
from tempfile import TemporaryDirectory

import numpy as np
from mpmath import mp
from scipy.integrate import quad
from scipy.optimize import brentq

from testutils import ExprTestCase, slowtest
from ..exprs import Constant, Variable, Sum, Product, Power
from ..exprs import Sin, Cos, Exp, Ln
from .function import SymbolicFunction
from .newton import DegenerateDerivative, StepLimitExceeded


def _x():
    return Variable()


class TestBasics(ExprTestCase):
    def test_construction(self):
        f = SymbolicFunction(Sum(_x(), Constant(1)))
        self.assertEqual(f.name, "f")
        self.assertEqual(f.str(), "f(x) = (x + 1)")
        self.assertEqual(str(f), "f(x) = (x + 1)")
        self.assertEqual(repr(f), "<SymbolicFunction: f(x) = (x + 1)>")
        g = SymbolicFunction(Sin(_x()), name="g")
        self.assertEqual(g.str(), "g(x) = sin(x)")
        with self.assertRaises(TypeError):
            SymbolicFunction(3.0)

    def test_evaluate(self):
        f = SymbolicFunction(Product(Sin(_x()), Exp(_x())))
        for x in np.linspace(-1, 1, 5):
            self.assertAlmostEqual(f.evaluate(x), math.sin(x)*math.exp(x))
            self.assertEqual(f(x), f.evaluate(x))
        with mp.workdps(30):
            val = f.evaluate(mp.mpf(1), use_mp=True)
            self.assertTrue(mp.almosteq(val, mp.sin(1)*mp.exp(1),
                                        rel_eps=mp.mpf('1e-28')))


class TestDerivatives(ExprTestCase):
    def test_derivative(self):
        expr = Power(_x(), 3)
        f = SymbolicFunction(expr, name="h")
        df = f.derivative()
        self.assertEqual(df.name, "h'")
        self.assertEqual(df.str(), "h'(x) = ((3 * (x)^2) * 1)")
        self.assertAlmostEqual(df.evaluate(2), 12)
        # The source function is untouched and shares nothing with the derivative.
        self.assertIs(f.expression, expr)
        self.assertEqual(f.str(), "h(x) = (x)^3")
        self.assertNoSharedNodes(f.expression, df.expression)

    def test_nth_derivative(self):
        f = SymbolicFunction(Power(_x(), 3))
        d3 = f.nth_derivative(3)
        self.assertEqual(d3.name, "f'''")
        for x in np.linspace(0.5, 3, 6):
            self.assertAlmostEqual(d3.evaluate(x), 6)
        d2 = f.nth_derivative(2)
        self.assertEqual(d2.name, "f''")
        self.assertAlmostEqual(d2.evaluate(1.5), 9)
        self.assertEqual(d2.str(), f.derivative().derivative().str())

    def test_nth_derivative_zero(self):
        f = SymbolicFunction(Sum(Sin(_x()), Power(_x(), 2)), name="g")
        g = f.nth_derivative(0)
        self.assertIsNot(g, f)
        self.assertEqual(g.name, "g")
        self.assertEqual(g.str(), f.str())
        self.assertNoSharedNodes(f.expression, g.expression)
        for x in np.linspace(-2, 2, 5):
            self.assertEqual(g.evaluate(x), f.evaluate(x))

    def test_nth_derivative_negative(self):
        f = SymbolicFunction(_x())
        with self.assertRaises(ValueError):
            f.nth_derivative(-1)

    def test_nth_derivative_sin(self):
        f = SymbolicFunction(Sin(_x()))
        refs = [math.sin, math.cos, lambda t: -math.sin(t),
                lambda t: -math.cos(t), math.sin]
        for n, ref in enumerate(refs):
            fn = f.nth_derivative(n)
            for x in np.linspace(-2, 2, 5):
                self.assertAlmostEqual(fn.evaluate(x), ref(x), places=12)


class TestIntegrate(ExprTestCase):
    def test_identity(self):
        f = SymbolicFunction(_x())
        self.assertAlmostEqual(f.integrate(0, 2), 2.0, delta=0.01)
        self.assertAlmostEqual(f.integrate(0, 2, steps=1), 2.0, places=14)
        self.assertAlmostEqual(f.integrate(2, 0), -2.0, places=12)

    def test_against_quad(self):
        exprs = [
            Sin(_x()),
            Product(_x(), Exp(_x())),
            Ln(Sum(_x(), Constant(2))),
            Power(Cos(_x()), 2),
        ]
        for expr in exprs:
            f = SymbolicFunction(expr)
            ref, _ = quad(f.evaluator(), 0.0, 1.0)
            self.assertAlmostEqual(f.integrate(0.0, 1.0), ref, delta=1e-5)

    def test_sin(self):
        f = SymbolicFunction(Sin(_x()))
        self.assertAlmostEqual(f.integrate(0, math.pi), 2.0, delta=1e-5)

    def test_convergence_order(self):
        # The trapezoidal rule converges quadratically in the step size.
        f = SymbolicFunction(Exp(_x()))
        exact = math.e - 1
        err1 = abs(f.integrate(0, 1, steps=50) - exact)
        err2 = abs(f.integrate(0, 1, steps=100) - exact)
        self.assertAlmostEqual(err1/err2, 4.0, delta=0.05)

    def test_invalid_steps(self):
        f = SymbolicFunction(_x())
        with self.assertRaises(ValueError):
            f.integrate(0, 1, steps=0)
        with self.assertRaises(ValueError):
            f.integrate(0, 1, steps=-5)

    def test_mpmath(self):
        f = SymbolicFunction(Exp(_x()))
        with mp.workdps(30):
            val = f.integrate(0, 1, steps=100, use_mp=True)
            self.assertIsInstance(val, mp.mpf)
            # error of the trapezoidal rule: (b-a) h^2 f''/12 ~ 1.4e-5
            self.assertAlmostEqual(float(val), math.e - 1, delta=2e-5)


class TestLimit(ExprTestCase):
    def test_sinc(self):
        f = SymbolicFunction(Product(Sin(_x()), Power(_x(), -1)))
        self.assertAlmostEqual(f.limit(0), 1.0, places=9)
        self.assertAlmostEqual(f.limit(0, epsilon=1e-3), math.sin(1e-3)/1e-3)

    def test_offset(self):
        f = SymbolicFunction(_x())
        self.assertEqual(f.limit(2.0, epsilon=0.5), 2.5)

    def test_mpmath_precision(self):
        f = SymbolicFunction(_x())
        with mp.workdps(30):
            val = f.limit(1, epsilon=1e-20, use_mp=True)
            self.assertIsInstance(val, mp.mpf)
            self.assertTrue(mp.almosteq(val - 1, mp.mpf(1e-20),
                                        rel_eps=mp.mpf('1e-10')))


class TestTaylor(ExprTestCase):
    def test_exp(self):
        f = SymbolicFunction(Exp(_x()))
        coeffs = f.taylor_series(0, 6)
        self.assertEqual(len(coeffs), 6)
        self.assertListAlmostEqual(coeffs, [1, 1, 0.5, 0.1667, 0.04167, 0.00833],
                                   delta=1e-3)
        self.assertListAlmostEqual(
            coeffs, [1/math.factorial(i) for i in range(6)], delta=1e-14
        )

    def test_polynomial(self):
        # p(x) = 2 + 3x + x^3 around x = 1: p(1+t) = 6 + 6t + 3t^2 + t^3
        p = Sum(Sum(Constant(2), Product(Constant(3), _x())), Power(_x(), 3))
        f = SymbolicFunction(p)
        self.assertListAlmostEqual(f.taylor_series(1, 5), [6, 6, 3, 1, 0],
                                   delta=1e-12)

    def test_sin(self):
        f = SymbolicFunction(Sin(_x()))
        self.assertListAlmostEqual(
            f.taylor_series(0, 6), [0, 1, 0, -1/6, 0, 1/120], delta=1e-14
        )

    def test_empty(self):
        f = SymbolicFunction(Exp(_x()))
        self.assertEqual(f.taylor_series(0, 0), [])
        self.assertEqual(f.taylor_series(0, -3), [])

    def test_source_untouched(self):
        f = SymbolicFunction(Cos(_x()))
        before = f.str()
        f.taylor_series(0.5, 4)
        self.assertEqual(f.str(), before)

    def test_mpmath(self):
        f = SymbolicFunction(Exp(_x()))
        with mp.workdps(30):
            coeffs = f.taylor_series(0, 5, use_mp=True)
            for i, c in enumerate(coeffs):
                self.assertTrue(mp.almosteq(c, mp.one/mp.factorial(i),
                                            rel_eps=mp.mpf('1e-28')))

    @slowtest
    def test_many_terms(self):
        f = SymbolicFunction(Exp(Product(Constant(2), _x())))
        coeffs = f.taylor_series(0, 10)
        self.assertListAlmostEqual(
            coeffs, [2**i/math.factorial(i) for i in range(10)], delta=1e-12
        )


class TestFindRoot(ExprTestCase):
    def test_quadratic(self):
        f = SymbolicFunction(Sum(Power(_x(), 2), Constant(-4)))
        root = f.find_root(3.0)
        self.assertAlmostEqual(root, 2.0, delta=1e-6)
        root = f.find_root(-3.0)
        self.assertAlmostEqual(root, -2.0, delta=1e-6)

    def test_against_brentq(self):
        # cos(x) = x
        f = SymbolicFunction(Sum(Cos(_x()), Product(Constant(-1), _x())))
        ref = brentq(f.evaluator(), 0, 1, xtol=1e-14)
        self.assertAlmostEqual(f.find_root(0.5, tolerance=1e-12), ref,
                               places=12)

    def test_degenerate(self):
        f = SymbolicFunction(Power(_x(), 3))
        with self.assertRaises(DegenerateDerivative):
            f.find_root(0.0)

    def test_no_convergence(self):
        f = SymbolicFunction(Exp(_x()))
        with self.assertRaises(StepLimitExceeded):
            f.find_root(0.0, max_iterations=5)
        self.assertEqual(f.find_root(0.0, max_iterations=5, disp=False), -5.0)

    def test_mpmath(self):
        f = SymbolicFunction(Sum(Power(_x(), 2), Constant(-2)))
        with mp.workdps(40):
            root = f.find_root(1, tolerance=mp.mpf('1e-30'), use_mp=True)
            self.assertTrue(mp.almosteq(root, mp.sqrt(2),
                                        rel_eps=mp.mpf('1e-30')))


class TestTabulate(ExprTestCase):
    def test_points(self):
        f = SymbolicFunction(Power(_x(), 2))
        table = f.tabulate(0.1, 0.7, 7)
        self.assertEqual(len(table), 7)
        self.assertEqual(table[0][0], 0.1)
        self.assertEqual(table[-1][0], 0.7)
        for x, y in table:
            self.assertAlmostEqual(y, x**2, places=14)
        xs = [x for x, _ in table]
        self.assertListAlmostEqual(np.diff(xs).tolist(), [0.1]*6, places=14)

    def test_two_points(self):
        f = SymbolicFunction(Constant(3))
        self.assertEqual(f.tabulate(-1, 1, 2), [(-1.0, 3.0), (1.0, 3.0)])

    def test_invalid(self):
        f = SymbolicFunction(_x())
        with self.assertRaises(ValueError):
            f.tabulate(0, 1, 1)
        with self.assertRaises(ValueError):
            f.tabulate(0, 1, 0)


class TestSeriesSum(ExprTestCase):
    def test_sums(self):
        f = SymbolicFunction(_x())
        self.assertEqual(f.series_sum(1, 4, lambda n: n), 10.0)
        self.assertEqual(f.series_sum(3, 3, lambda n: n**2), 9.0)
        self.assertEqual(f.series_sum(5, 4, lambda n: n), 0.0)
        self.assertAlmostEqual(f.series_sum(1, 10000, lambda n: 1.0/n**2),
                               math.pi**2/6, delta=2e-4)

    def test_with_function(self):
        # Riemann sum of f(x) = x^2 on [0, 1] using the function itself.
        f = SymbolicFunction(Power(_x(), 2))
        N = 1000
        val = f.series_sum(1, N, lambda n: f((n-0.5)/N)/N)
        self.assertAlmostEqual(val, 1/3, delta=1e-6)


class TestNonFinite(ExprTestCase):
    def test_integrate_overflow(self):
        f = SymbolicFunction(Constant(1e308))
        with np.errstate(all='ignore'):
            self.assertEqual(f.integrate(0, 1, steps=3), np.inf)

    def test_integrate_infinite_samples(self):
        with np.errstate(all='ignore'):
            self.assertEqual(
                SymbolicFunction(Power(_x(), -1)).integrate(0, 1, steps=4),
                np.inf
            )
            self.assertEqual(
                SymbolicFunction(Ln(_x())).integrate(0, 1, steps=4),
                -np.inf
            )
            # 1/(x (x-1)) is -inf at x=0 and +inf at x=1
            f = SymbolicFunction(Product(Power(_x(), -1),
                                         Power(Sum(_x(), -1), -1)))
            self.assertTrue(np.isnan(f.integrate(-1, 2, steps=3)))

    def test_series_sum(self):
        f = SymbolicFunction(_x())
        self.assertEqual(f.series_sum(1, 2, lambda n: 1e308), np.inf)
        self.assertEqual(f.series_sum(1, 3, lambda n: -np.inf), -np.inf)
        val = f.series_sum(1, 2, lambda n: np.inf if n == 1 else -np.inf)
        self.assertTrue(np.isnan(val))

    def test_tabulate(self):
        f = SymbolicFunction(Ln(_x()))
        with np.errstate(all='ignore'):
            table = f.tabulate(0, 1, 3)
            neg = SymbolicFunction(Ln(_x())).tabulate(-1, 1, 3)
        self.assertEqual(table[0], (0.0, -np.inf))
        self.assertAlmostEqual(table[1][1], np.log(0.5))
        self.assertTrue(np.isnan(neg[0][1]))
        self.assertEqual(neg[1], (0.0, -np.inf))

    def test_taylor_series(self):
        f = SymbolicFunction(Ln(_x()))
        with np.errstate(all='ignore'):
            coeffs = f.taylor_series(0, 3)
        self.assertEqual(coeffs[0], -np.inf)
        self.assertEqual(coeffs[1], np.inf)
        # 0 * inf from the product rule
        self.assertTrue(np.isnan(coeffs[2]))


class TestFiles(ExprTestCase):
    def test_save_load(self):
        f = SymbolicFunction(Product(Sin(_x()), Exp(_x())), name="g")
        with TemporaryDirectory() as tmp:
            fname = f.save(op.join(tmp, "func"), verbose=False)
            with self.assertRaises(RuntimeError):
                f.save(op.join(tmp, "func"), verbose=False)
            loaded = SymbolicFunction.load(fname)
        self.assertIsType(loaded, SymbolicFunction)
        self.assertEqual(loaded.name, "g")
        self.assertEqual(loaded.str(), f.str())
        self.assertEqual(loaded.evaluate(0.3), f.evaluate(0.3))

    def test_export_table(self):
        f = SymbolicFunction(Power(_x(), 2), name="p")
        with TemporaryDirectory() as tmp:
            fname = op.join(tmp, "table.txt")
            f.export_table(fname, 0, 2, 5, verbose=False)
            with open(fname) as fh:
                header = fh.readline().rstrip("\n")
            data = np.loadtxt(fname, skiprows=1)
            with self.assertRaises(RuntimeError):
                f.export_table(fname, 0, 2, 5, verbose=False)
            f.export_table(fname, 0, 1, 3, overwrite=True, verbose=False)
            data2 = np.loadtxt(fname, skiprows=1)
        self.assertEqual(header, "x\tp(x)")
        self.assertEqual(data.shape, (5, 2))
        self.assertListAlmostEqual(data[:,0].tolist(), [0, 0.5, 1, 1.5, 2])
        self.assertListAlmostEqual(data[:,1].tolist(), [0, 0.25, 1, 2.25, 4])
        self.assertEqual(data2.shape, (3, 2))

    def test_export_overwrite_leaves_no_temporaries(self):
        f = SymbolicFunction(Ln(_x()), name="l")
        with TemporaryDirectory() as tmp:
            fname = op.join(tmp, "table.txt")
            f.export_table(fname, 1, 2, 3, verbose=False)
            with np.errstate(all='ignore'):
                f.export_table(fname, 0, 1, 3, overwrite=True, verbose=False)
            self.assertEqual(os.listdir(tmp), ["table.txt"])
            data = np.loadtxt(fname, skiprows=1)
        self.assertEqual(data[0,1], -np.inf)
        self.assertAlmostEqual(data[2,1], 0.0)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
