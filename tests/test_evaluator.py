"""
Interpreter semantics, exercised one small snippet at a time.
"""
import math
import unittest
from unittest import mock

from treelox import diagnostics, errors, primitive
from treelox.tree_walker import evaluator, executive
from treelox.tree_walker.values import LoxClass, LoxInstance

def _run(text, with_preamble=True) -> list[str]:
	output = []
	report = diagnostics.Report()
	executive.Executive(report, output=output.append, with_preamble=with_preamble).run_text(text)
	return output

class Quiet(diagnostics.Report):
	def __init__(self):
		super().__init__()
		self.complain_to_console = mock.Mock()

class HelperTests(unittest.TestCase):

	def test_truthiness(self):
		for falsy in (None, False):
			self.assertFalse(evaluator.is_truthy(falsy))
		for truthy in (True, 0.0, "", "false", LoxClass("C", None, {})):
			self.assertTrue(evaluator.is_truthy(truthy))

	def test_equality_never_coerces(self):
		self.assertFalse(evaluator.is_equal(True, 1.0))
		self.assertFalse(evaluator.is_equal(False, 0.0))
		self.assertFalse(evaluator.is_equal(None, False))
		self.assertTrue(evaluator.is_equal(None, None))
		self.assertTrue(evaluator.is_equal(2.0, 2.0))
		self.assertTrue(evaluator.is_equal("x", "x"))

	def test_stringify(self):
		cls = LoxClass("Thing", None, {})
		self.assertEqual("nil", evaluator.stringify(None))
		self.assertEqual("true", evaluator.stringify(True))
		self.assertEqual("3", evaluator.stringify(3.0))
		self.assertEqual("-0.5", evaluator.stringify(-0.5))
		self.assertEqual("NaN", evaluator.stringify(math.nan))
		self.assertEqual("100", evaluator.stringify(100.0))
		self.assertEqual("-0", evaluator.stringify(-0.0))
		self.assertEqual("1e+300", evaluator.stringify(1e300))
		self.assertEqual("<class Thing>", evaluator.stringify(cls))
		self.assertEqual("<instanceof <class Thing>>", evaluator.stringify(LoxInstance(cls)))
		self.assertEqual("<native fn>", evaluator.stringify(primitive.Native(primitive.NATIVES["clock"])))

class StatementTests(unittest.TestCase):

	def test_return_from_deep_inside_loops(self):
		self.assertEqual(["3"], _run("""
			fun find() {
				var i = 0;
				while (true) {
					if (i == 3) { return i; }
					i = i + 1;
				}
			}
			print find();
		"""))

	def test_falling_off_the_end_yields_nil(self):
		self.assertEqual(["nil", "nil"], _run("fun f() {} fun g() { return; } print f(); print g();"))

	def test_scopes_unwind_on_return(self):
		self.assertEqual(["inner", "global"], _run("""
			var a = "global";
			fun f() { { var a = "inner"; return a; } }
			print f();
			print a;
		"""))

	def test_recursion_runs_a_few_hundred_deep(self):
		self.assertEqual(["300"], _run("""
			fun count(n) { if (n == 0) return 0; return 1 + count(n - 1); }
			print count(300);
		"""))

	def test_recursion_and_function_values(self):
		self.assertEqual(["120", "<fn fact>"], _run("""
			fun fact(n) { if (n <= 1) return 1; return n * fact(n - 1); }
			print fact(5);
			print fact;
		"""))

	def test_while_and_assignment_value(self):
		self.assertEqual(["3", "3"], _run("""
			var i = 0;
			var j;
			while (i < 3) j = i = i + 1;
			print i;
			print j;
		"""))

	def test_logical_operators_yield_operands(self):
		self.assertEqual(["1", "nil", "2"], _run('print 1 and nil or 1; print nil and 2; print false or 2;'))

	def test_short_circuit_skips_side_effects(self):
		self.assertEqual(["never called"], _run("""
			fun loud() { print "never called"; return true; }
			false and loud();
			true or loud();
			true and loud();
		"""))

class ObjectTests(unittest.TestCase):

	def test_bound_method_remembers_receiver(self):
		self.assertEqual(["hi bob"], _run("""
			class Greeter {
				init(n) { this.n = n; }
				hi() { return "hi " + this.n; }
			}
			var m = Greeter("bob").hi;
			print m();
		"""))

	def test_fields_shadow_methods(self):
		self.assertEqual(["field"], _run("""
			class C { m() { return "method"; } }
			var c = C();
			c.m = "field";
			print c.m;
		"""))

	def test_methods_are_closures(self):
		self.assertEqual(["outer"], _run("""
			var tag = "global";
			fun make() {
				var tag = "outer";
				class Local { show() { return tag; } }
				return Local();
			}
			print make().show();
		"""))

	def test_initializer_early_return_yields_instance(self):
		self.assertEqual(["<instanceof <class C>>", "true"], _run("""
			class C { init(flag) { if (flag) return; this.x = 1; } }
			var c = C(true);
			print c;
			print c.init(false) == c;
		"""))

	def test_inherited_initializer(self):
		self.assertEqual(["7"], _run("""
			class A { init(x) { this.x = x; } }
			class B < A {}
			print B(7).x;
		"""))

	def test_super_is_static(self):
		self.assertEqual(["A", "C"], _run("""
			class A { who() { return "A"; } }
			class B < A { who() { return "B"; } ask() { return super.who(); } }
			class C < B { who() { return "C"; } }
			print C().ask();
			print C().who();
		"""))

	def test_class_without_initializer_takes_any_arguments(self):
		self.assertEqual(["<instanceof <class Bag>>"], _run("class Bag {} print Bag(1, 2);"))

class NativeTests(unittest.TestCase):

	def test_builtin_array(self):
		self.assertEqual(["3", "nil", "x"], _run("""
			var a = builtin_array(3);
			print a.length;
			print a.get(2);
			a.set(2, "x");
			print a.get(2);
		""", with_preamble=False))

	def test_clock_is_a_number(self):
		self.assertEqual(["true"], _run("print clock() > 0;"))

	def test_preamble_can_be_skipped(self):
		report = Quiet()
		with self.assertRaises(executive.Yuck):
			executive.Executive(report, with_preamble=False).run_text("Array();")
		self.assertIn("Undefined variable 'Array'.", report.issues[0].intro)

class RuntimeErrorTests(unittest.TestCase):

	def _failure(self, text) -> errors.LoxRuntimeError:
		report = Quiet()
		with self.assertRaises(executive.Yuck) as cm:
			executive.Executive(report, output=lambda text:None).run_text(text)
		self.assertTrue(report.failed_at_runtime())
		return cm.exception.__cause__

	def test_error_stops_the_program(self):
		output = []
		report = Quiet()
		with self.assertRaises(executive.Yuck):
			executive.Executive(report, output=output.append).run_text("print 1;\nprint nope;\nprint 2;")
		self.assertEqual(["1"], output)
		self.assertEqual(["Undefined variable 'nope'.\n[line 2]"], [p.intro for p in report.issues])

	def test_native_arity(self):
		ex = self._failure("clock(1);")
		self.assertIsInstance(ex, errors.ArityMismatch)
		self.assertEqual("Expected 0 arguments but got 1.", ex.message)

	def test_array_index_must_be_whole(self):
		for text in ['builtin_array(2).get("x");', "builtin_array(2).get(0.5);"]:
			with self.subTest(text):
				self.assertIsInstance(self._failure(text), errors.OperandTypeError)

	def test_array_length_must_make_sense(self):
		self.assertIsInstance(self._failure("builtin_array(-1);"), errors.OperandTypeError)

	def test_array_has_no_fields(self):
		self.assertIsInstance(self._failure("builtin_array(1).x = 1;"), errors.NotAnInstance)
		self.assertIsInstance(self._failure("builtin_array(1).push;"), errors.UndefinedProperty)

	def test_super_method_missing(self):
		ex = self._failure("class A {} class B < A { m() { return super.m(); } } B().m();")
		self.assertIsInstance(ex, errors.UndefinedProperty)
		self.assertEqual("Undefined property 'm'.", ex.message)

	def test_unbounded_recursion_is_a_runtime_error(self):
		ex = self._failure("fun forever(n) {\n  return forever(n + 1);\n}\nforever(0);")
		self.assertIsInstance(ex, errors.StackOverflow)
		self.assertEqual("Stack overflow.", ex.message)
		self.assertEqual(2, ex.token.line)

	def test_array_bounds_follow_length_not_capacity(self):
		ex = self._failure("Array().get(2);")
		self.assertIsInstance(ex, errors.IndexOutOfRange)

	def test_preamble_errors_point_into_the_preamble(self):
		report = Quiet()
		with self.assertRaises(executive.Yuck):
			executive.Executive(report).run_text("var a = Array();\na.get(5);")
		pic = report.issues[0]
		self.assertEqual("Array index out of range.\n[line 16]", pic.intro)
		text = pic.as_text()
		self.assertIn("preamble.lox", text)
		self.assertIn("builtin_check_index(index, this.length)", text)

	def test_error_token_is_the_culprit(self):
		ex = self._failure("\n\nprint 1 - nil;")
		self.assertEqual(3, ex.token.line)
		self.assertEqual("-", ex.token.lexeme)

class PersistenceTests(unittest.TestCase):
	""" One executive, many inputs, as in the interactive mode. """

	def test_globals_persist(self):
		output = []
		report = diagnostics.Report()
		ex = executive.Executive(report, output=output.append)
		ex.run_text("var x = 1; fun bump() { x = x + 1; return x; }")
		ex.run_text("bump();")
		ex.run_text("{ var local = bump(); print local; }")
		self.assertEqual(["3"], output)

	def test_closures_survive_their_block(self):
		output = []
		report = diagnostics.Report()
		ex = executive.Executive(report, output=output.append)
		ex.run_text("var f; { var hidden = \"kept\"; fun g() { return hidden; } f = g; }")
		ex.run_text("print f();")
		self.assertEqual(["kept"], output)

	def test_errors_illustrate_the_text_they_came_from(self):
		report = Quiet()
		ex = executive.Executive(report)
		ex.run_text("fun f() {\n  return \"abc\" + q;\n}")
		with self.assertRaises(executive.Yuck):
			ex.run_text("f();")
		pic = report.issues[0]
		self.assertEqual("Undefined variable 'q'.\n[line 2]", pic.intro)
		self.assertIn("return \"abc\" + q;", pic.as_text())

	def test_failed_remove_leaves_the_array_alone(self):
		output = []
		report = Quiet()
		ex = executive.Executive(report, output=output.append)
		ex.run_text("var a = Array();")
		with self.assertRaises(executive.Yuck):
			ex.run_text("a.removeLast();")
		report.reset()
		ex.run_text("print a.length; a.add(1); print a.removeLast(); print a.length;")
		self.assertEqual(["0", "1", "0"], output)

if __name__ == '__main__':
	unittest.main()
