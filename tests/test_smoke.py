from pathlib import Path
import unittest

from treelox import diagnostics
from treelox.tree_walker import executive

base_folder = Path(__file__).parent.parent
examples = base_folder/"examples"

def _good(which) -> list[str]:
	path = examples / (which + ".lox")
	report = diagnostics.Report(verbose=False)
	output = []
	try:
		executive.Executive(report, output=output.append).run_text(path.read_text(encoding="utf-8"), path)
	except executive.Yuck as ex:
		assert report.sick()
		report.complain_to_console()
		assert False, "Test failed %s phase"%ex.args[0]
	report.assert_no_issues("Ostensibly-good example left issues behind.")
	return output

class ExampleSmokeTests(unittest.TestCase):
	""" Run all the examples; Test for no smoke, and the right output. """

	def test_fibonacci(self):
		self.assertEqual(["0", "1", "1", "2", "3", "5", "8"], _good("fibonacci"))

	def test_counter_shares_state(self):
		self.assertEqual(["1", "2", "1", "3"], _good("counter"))

	def test_food(self):
		self.assertEqual([
			"Tasty Fries",
			"<instanceof <class DescribedFood>>",
			"<class DescribedFood>",
		], _good("food"))

	def test_scope(self):
		self.assertEqual(["global", "global", "block", "inner", "outer"], _good("scope"))

	def test_initializer(self):
		self.assertEqual(["0", "false", "true", "true", "5", "<instanceof <class Bag>>"], _good("initializer"))

	def test_super_dispatch(self):
		self.assertEqual(["A method", "base"], _good("super_dispatch"))

	def test_truthiness(self):
		self.assertEqual([
			"0 is truthy",
			"empty string is truthy",
			"nil is falsy",
			"false is falsy",
			"functions are truthy",
			"true", "false",
			"default", "first", "false",
			"false", "true", "false", "true",
		], _good("truthiness"))

	def test_arithmetic(self):
		self.assertEqual([
			"7", "9", "2.5", "0",
			"true", "true", "false",
			"concat",
			"Infinity", "-Infinity",
		], _good("arithmetic"))

	def test_stdlib(self):
		self.assertEqual([
			"<native array>", "5", "nil", "Hey!",
			"0", "100", "0", "99", "99", "99",
			"true",
		], _good("stdlib"))

if __name__ == '__main__':
	unittest.main()
