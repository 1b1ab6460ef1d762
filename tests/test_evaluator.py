import io
import math
import unittest

from lox.diagnostics import Report
from lox.executive import Session
from lox.front_end import parse_text
from lox.tree_walker.evaluator import Interpreter, stringify, is_truthy, is_equal
from lox.tree_walker.values import Instance, LoxClass

class Harness:
	""" A session whose output and diagnostics both land in strings. """
	def __init__(self):
		self.out = io.StringIO()
		self.report = Report(stderr=io.StringIO())
		self.session = Session(self.report, self.out)
	
	def run(self, text):
		self.session.run(text)
		return self.out.getvalue().splitlines()

def _run(text):
	harness = Harness()
	return harness.run(text), harness.report

class ValueTests(unittest.TestCase):
	
	def test_stringify(self):
		for value, text in [
			(None, "nil"), (True, "true"), (False, "false"),
			(7.0, "7"), (-0.5, "-0.5"), (2.5, "2.5"), (1e100, "1e+100"),
			(math.inf, "inf"), ("str", "str"),
		]:
			with self.subTest(text):
				self.assertEqual(text, stringify(value))
		cls = LoxClass("Thing", None, {})
		self.assertEqual("Thing", stringify(cls))
		self.assertEqual("Thing instance", stringify(Instance(cls)))
	
	def test_truthiness(self):
		for value in [0.0, "", "false", True]:
			assert is_truthy(value), value
		for value in [None, False]:
			assert not is_truthy(value), value
	
	def test_equality_never_coerces(self):
		assert is_equal(None, None)
		assert not is_equal(None, False)
		assert not is_equal(1.0, True)
		assert not is_equal(0.0, False)
		assert not is_equal(1.0, "1")
		assert is_equal("a", "a")
		assert is_equal(2.0, 2.0)
		assert is_equal(math.nan, math.nan)
		assert not is_equal(math.nan, 1.0)

class SemanticsTests(unittest.TestCase):
	
	def test_arithmetic(self):
		out, report = _run("print 1 + 2 * 3; print 10 / 4; print 0 / 0; print -8 / 0;")
		self.assertEqual(["7", "2.5", "nan", "-inf"], out)
		assert report.ok()
	
	def test_nan_equals_itself_but_does_not_order(self):
		out, _ = _run("var n = 0 / 0; print n == n; print n != n; print n < n; print n == 1;")
		self.assertEqual(["true", "false", "false", "false"], out)
	
	def test_concatenation(self):
		out, _ = _run('print "foo" + "bar";')
		self.assertEqual(["foobar"], out)
	
	def test_logical_operators_yield_operands(self):
		out, _ = _run('print nil or 0; print 0 and "b"; print nil and boom(); print 1 or boom();')
		self.assertEqual(["0", "b", "nil", "1"], out)
	
	def test_counter_closure(self):
		out, _ = _run("""
			fun makeCounter() {
				var i = 0;
				fun count() { i = i + 1; print i; return i; }
				return count;
			}
			var counter = makeCounter();
			counter(); counter();
		""")
		self.assertEqual(["1", "2"], out)
	
	def test_shadowing_restores_outer(self):
		out, _ = _run('var a = "outer"; { var a = "inner"; print a; } print a;')
		self.assertEqual(["inner", "outer"], out)
	
	def test_subclass_without_init_skips_the_inherited_one(self):
		out, report = _run("""
			class A { init(x) { this.x = x; print "A.init"; } }
			class B < A {}
			var b = B();
			print b;
		""")
		self.assertEqual(["B instance"], out)
		assert report.ok()
	
	def test_loop_body_gets_fresh_scope_each_time(self):
		out, _ = _run("""
			var fns = nil;
			var first; var second;
			for (var i = 0; i < 2; i = i + 1) {
				var j = i;
				fun f() { print j; }
				if (i == 0) first = f; else second = f;
			}
			first(); second();
		""")
		self.assertEqual(["0", "1"], out)
	
	def test_super_dispatch(self):
		out, _ = _run("""
			class A { method() { print "A"; } }
			class B < A { method() { super.method(); print "B"; } }
			B().method();
		""")
		self.assertEqual(["A", "B"], out)
	
	def test_super_skips_the_runtime_class(self):
		out, _ = _run("""
			class A { say() { print "A"; } }
			class B < A { say() { print "B"; } test() { super.say(); } }
			class C < B { say() { print "C"; } }
			C().test();
		""")
		self.assertEqual(["A"], out)
	
	def test_initializer_returns_this(self):
		out, _ = _run("""
			class Box { init(v) { this.v = v; return; } }
			var b = Box(1);
			print b.init(2) == b;
			print b.v;
		""")
		self.assertEqual(["true", "2"], out)
	
	def test_methods_can_name_their_class(self):
		out, _ = _run("class Node { spawn() { return Node(); } } print Node().spawn();")
		self.assertEqual(["Node instance"], out)
	
	def test_clock(self):
		out, _ = _run("var t = clock(); print t > 0; print clock() >= t;")
		self.assertEqual(["true", "true"], out)

class RuntimeErrorTests(unittest.TestCase):
	
	def expect(self, text, message, line, output=()):
		out, report = _run(text)
		assert report.ok()
		assert report.had_runtime_error
		self.assertEqual(["%s\n[line %d]" % (message, line)], report.issues)
		self.assertEqual(list(output), out)
	
	def test_undefined_variable_stops_the_run(self):
		self.expect('print "before";\nprint nope;\nprint "after";', "Undefined variable 'nope'.", 2, ["before"])
	
	def test_undefined_property(self):
		self.expect("class A {}\nprint A().x;", "Undefined property 'x'.", 2)
	
	def test_type_errors(self):
		self.expect('print "foo" + 1;', "Operands must be two numbers or two strings.", 1)
		self.expect('print 1 < "2";', "Operands must be numbers.", 1)
		self.expect('print -"a";', "Operand must be a number.", 1)
	
	def test_arity(self):
		self.expect("class A {}\nA(1);", "Expected 0 arguments but got 1.", 2)
		self.expect("fun f(a, b) {}\nf(1);", "Expected 2 arguments but got 1.", 2)
	
	def test_inherited_initializer_is_not_the_constructor(self):
		self.expect("class A { init(x) {} }\nclass B < A {}\nB(1);", "Expected 0 arguments but got 1.", 3)
	
	def test_not_callable(self):
		self.expect('"str"();', "Can only call functions and classes.", 1)
	
	def test_not_an_instance(self):
		self.expect("print 1.x;", "Only instances have properties.", 1)
		self.expect("var a = 1;\na.x = 2;", "Only instances have fields.", 2)
	
	def test_superclass_must_be_a_class(self):
		self.expect("var x = 1;\nclass A < x {}", "Superclass must be a class.", 2)
	
	def test_no_implicit_globals(self):
		self.expect("x = 1;", "Undefined variable 'x'.", 1)
	
	def test_stack_overflow(self):
		self.expect("fun f() { f(); }\nf();", "Stack overflow.", 1)
	
	def test_stack_overflow_outside_any_call(self):
		# Too deep for the resolver as well, so go straight to the interpreter.
		report = Report(stderr=io.StringIO())
		out = io.StringIO()
		statements = parse_text("print 0;\nprint 1" + " + 1" * 6000 + ";\nprint 2;", report)
		assert report.ok()
		Interpreter(report, out).interpret(statements, {})
		assert report.had_runtime_error
		self.assertEqual(["Stack overflow.\n[line 2]"], report.issues)
		self.assertEqual(["0"], out.getvalue().splitlines())
	
	def test_environment_restored_after_error(self):
		harness = Harness()
		harness.run("var a = 1; { var a = 2; print nope; }")
		harness.report.reset()
		self.assertEqual(["1"], harness.run("print a;"))
	
	def test_reset_forgets_earlier_trouble(self):
		harness = Harness()
		harness.run("print nope;")
		self.assertEqual(1, len(harness.report.issues))
		harness.report.reset()
		harness.run("print 1 +;")
		self.assertEqual(["[line 1] Error at ';': Expect expression."], harness.report.issues)
		harness.report.reset()
		self.assertEqual([], harness.report.issues)
		assert harness.report.ok()
		assert not harness.report.had_runtime_error

class SessionTests(unittest.TestCase):
	
	def test_static_error_prevents_any_execution(self):
		out, report = _run('print "hi";\nprint 1 +;\nprint "there";')
		assert report.sick()
		self.assertEqual([], out)
		self.assertEqual(["[line 2] Error at ';': Expect expression."], report.issues)
	
	def test_resolution_error_prevents_any_execution(self):
		out, report = _run('print "hi";\n{ var a = a; }')
		assert report.sick()
		self.assertEqual([], out)
	
	def test_globals_persist_between_runs(self):
		harness = Harness()
		harness.run("var a = 1; fun get() { var b = a; { return b; } }")
		harness.run("a = 2;")
		self.assertEqual(["2"], harness.run("print get();"))
	
	def test_closures_from_earlier_runs(self):
		harness = Harness()
		harness.run("fun make() { var n = 0; fun inc() { n = n + 1; return n; } return inc; }")
		harness.run("var inc = make();")
		harness.run("inc();")
		self.assertEqual(["2"], harness.run("print inc();"))
	
	def test_exit_codes(self):
		for text, code in [
			("print 1;", 0),
			("print 1", 65),
			("return;", 65),
			("@", 65),
			("print nope;", 70),
			("print " + "(" * 5000 + "1" + ")" * 5000 + ";", 65),
			("print 1" + " + 1" * 6000 + ";", 65),
		]:
			with self.subTest(text[:20]):
				harness = Harness()
				harness.run(text)
				self.assertEqual(code, harness.session.exit_code())
	
	def test_print_ast(self):
		out = io.StringIO()
		session = Session(Report(stderr=io.StringIO()), out)
		session.run("print 1 + 2 * 3;", print_ast=True)
		self.assertEqual("(print (+ 1 (* 2 3)))\n", out.getvalue())


if __name__ == '__main__':
	unittest.main()
