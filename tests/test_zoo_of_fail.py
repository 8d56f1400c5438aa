from pathlib import Path
import unittest
from unittest import mock

from treelox import errors
from treelox.diagnostics import Report
from treelox.tree_walker.executive import Executive, Yuck

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False)
		self.complain_to_console = mock.Mock()
	pass

base_folder = Path(__file__).parent.parent
zoo_fail = base_folder/"zoo/fail"

def _attempt(folder:Path, filename:str):
	specimen_path = folder / filename
	assert specimen_path.exists(), specimen_path
	report = Silence()
	try:
		Executive(report, output=lambda text:None).run_text(specimen_path.read_text(encoding="utf-8"), specimen_path)
	except Yuck as ex:
		assert 0 == report.complain_to_console.call_count
		assert report.sick()
		return ex
	else:
		report.assert_no_issues("A specimen ran clean but left issues behind.")

def _identify_problem(folder:Path, filename:str):
	ex = _attempt(folder, filename)
	return "failed to fail" if ex is None else ex.args[0]

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """

	def expect(self, folder, cases):
		for basename in cases:
			with self.subTest(basename):
				self.assertEqual(folder, _identify_problem(zoo_fail / folder, basename + ".lox"))

	def test_00_parse(self):
		self.expect("parse", [
			"invalid_assignment",
			"missing_expression",
			"missing_semicolon",
			"superscript_digit",
			"unexpected_character",
			"unterminated_string",
		])

	def test_01_resolve(self):
		self.expect("resolve", [
			"duplicate_local",
			"inherit_self",
			"initializer_returns_value",
			"own_initializer",
			"super_outside_class",
			"super_without_superclass",
			"this_outside_class",
			"top_level_return",
		])

	def test_02_runtime(self):
		cases = {
			"add_string_number": errors.OperandTypeError,
			"array_get_past_length": errors.IndexOutOfRange,
			"arity_mismatch": errors.ArityMismatch,
			"compare_mixed": errors.OperandTypeError,
			"field_on_string": errors.NotAnInstance,
			"index_out_of_range": errors.IndexOutOfRange,
			"initializer_arity": errors.ArityMismatch,
			"negate_string": errors.OperandTypeError,
			"not_callable": errors.NotCallable,
			"property_of_number": errors.NotAnInstance,
			"stack_overflow": errors.StackOverflow,
			"superclass_not_class": errors.OperandTypeError,
			"undefined_global_assign": errors.UndefinedVariable,
			"undefined_property": errors.UndefinedProperty,
			"undefined_variable": errors.UndefinedVariable,
		}
		for basename, kind in cases.items():
			with self.subTest(basename):
				ex = _attempt(zoo_fail / "runtime", basename + ".lox")
				self.assertIsNotNone(ex, "failed to fail")
				self.assertEqual("runtime", ex.args[0])
				self.assertIs(kind, type(ex.__cause__))

	def test_runtime_messages(self):
		cases = {
			"add_string_number": "Operands must be two numbers or two strings.\n[line 1]",
			"arity_mismatch": "Expected 2 arguments but got 1.\n[line 4]",
			"undefined_global_assign": "Undefined variable 'unknown'.\n[line 1]",
			"superclass_not_class": "Superclass must be a class.\n[line 2]",
		}
		for basename, intro in cases.items():
			with self.subTest(basename):
				report = Silence()
				specimen_path = zoo_fail / "runtime" / (basename + ".lox")
				with self.assertRaises(Yuck):
					Executive(report, output=lambda text:None).run_text(specimen_path.read_text(encoding="utf-8"), specimen_path)
				self.assertTrue(report.failed_at_runtime())
				self.assertEqual([intro], [pic.intro for pic in report.issues])

	def test_static_issues_are_not_runtime_failures(self):
		report = Silence()
		specimen_path = zoo_fail / "resolve" / "duplicate_local.lox"
		with self.assertRaises(Yuck):
			Executive(report).run_text(specimen_path.read_text(encoding="utf-8"), specimen_path)
		self.assertFalse(report.failed_at_runtime())

if __name__ == '__main__':
	unittest.main()
