"""
The overall control: text goes through each phase in turn,
and the report is consulted before moving on to the next.
"""
import sys
from pathlib import Path
from typing import Optional, Sequence
from .. import syntax
from ..diagnostics import Report
from ..errors import LoxRuntimeError
from ..front_end import parse_text
from ..resolution import resolve_program
from .evaluator import TreeWalker

PREAMBLE_PATH = Path(__file__).parent.parent / "sys" / "preamble.lox"

# Each Lox call costs the host several Python frames.
RECURSION_LIMIT = 10_000

class Yuck(Exception):
	"""
	The first argument will be the name of the phase fraught with error:
	"parse", "resolve", or "runtime". The end-user might not care
	about this, but the command-line and the tests do.
	"""
	pass

class Executive:
	"""
	Owns one tree-walker (and therefore one set of globals) for its lifetime,
	so that a REPL can run many snippets against the same state.
	"""
	def __init__(self, report:Report, output=print, with_preamble=True):
		self.report = report
		if sys.getrecursionlimit() < RECURSION_LIMIT:
			sys.setrecursionlimit(RECURSION_LIMIT)
		self.walker = TreeWalker(output)
		if with_preamble: self._load_preamble()

	def _load_preamble(self):
		self.report.info("Loading", PREAMBLE_PATH)
		with open(PREAMBLE_PATH, "r", encoding="utf-8") as fh:
			text = fh.read()
		try: self.run_text(text, PREAMBLE_PATH)
		except Yuck:
			self.report.assert_no_issues("The preamble is broken.")
			raise

	def prepare(self, text:str, path:Optional[Path]=None) -> tuple[list[syntax.Stmt], dict[syntax.Expr, int]]:
		""" Everything short of running: Raises Yuck if the text is not fit to run. """
		self.report.info("Parsing", path or "<input>")
		statements = parse_text(text, path, self.report)
		if self.report.sick(): raise Yuck("parse")
		self.report.info("Resolving", len(statements), "statement(s)")
		distances = resolve_program(statements, self.report)
		if self.report.sick(): raise Yuck("resolve")
		return statements, distances

	def run_program(self, statements:Sequence[syntax.Stmt], distances:dict[syntax.Expr, int]):
		self.report.info("Running")
		self.walker.note_distances(distances)
		try:
			self.walker.interpret(statements)
		except LoxRuntimeError as error:
			self.report.runtime_error(error)
			raise Yuck("runtime") from error
		except RecursionError:
			# Deeply nested blocks, not calls: there is no call site to blame.
			self.report.stack_overflow("running", at_runtime=True)
			raise Yuck("runtime") from None

	def run_text(self, text:str, path:Optional[Path]=None):
		statements, distances = self.prepare(text, path)
		self.run_program(statements, distances)
