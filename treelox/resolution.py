"""
The static pass between parsing and running.

By the time this pass is finished, every reference to a local variable
has a known distance: the number of scopes to hop outward from the
scope of the reference to the scope that declares the name.
References without a distance are globals, looked up by name at run-time.

The distances go in a side-table keyed by the identity of each
`Variable`, `Assign`, `This`, or `Super` node, because two textually
identical references at different sites must resolve independently.

Along the way, this pass catches the static errors that the grammar
cannot: duplicate locals, reading a local in its own initializer,
misplaced `return`, `this`, and `super`, and a class inheriting itself.
Errors go to the report and the walk continues, so that one run can
reveal several problems.
"""
from enum import Enum
from typing import Sequence
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .ontology import Token, THIS, SUPER, INITIALIZER

class FunctionKind(Enum):
	NONE = "none"
	FUNCTION = "function"
	INITIALIZER = "initializer"
	METHOD = "method"

class ClassKind(Enum):
	NONE = "none"
	CLASS = "class"
	SUBCLASS = "subclass"

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""
	def tour(self, items):
		for i in items:
			self.visit(i)

	def visit_Literal(self, expr:syntax.Literal): pass
	def visit_Grouping(self, expr:syntax.Grouping): self.visit(expr.expression)
	def visit_Unary(self, expr:syntax.Unary): self.visit(expr.right)

	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.arguments)

	def visit_Get(self, expr:syntax.Get):
		# Properties are looked up dynamically, so only the object matters.
		self.visit(expr.obj)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.obj)

	def visit_Expression(self, stmt:syntax.Expression): self.visit(stmt.expression)
	def visit_Print(self, stmt:syntax.Print): self.visit(stmt.expression)

	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None: self.visit(stmt.else_branch)

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

class Resolver(TopDown):
	distances: dict[syntax.Expr, int]
	report: Report

	_scopes: list[dict[str, bool]]  # False means declared but not yet initialized.
	_function: FunctionKind
	_class: ClassKind

	def __init__(self, report:Report):
		self.report = report
		self.distances = {}
		self._scopes = []
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE

	def resolve(self, statements:Sequence[syntax.Stmt]) -> dict[syntax.Expr, int]:
		try: self.tour(statements)
		except RecursionError: self.report.stack_overflow("resolving", at_runtime=False)
		return self.distances

	def _begin_scope(self): self._scopes.append({})
	def _end_scope(self): self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.lexeme in scope:
			self.report.static_error(name, "Already a variable with this name in this scope.")
		scope[name.lexeme] = False

	def _define(self, name:Token):
		if self._scopes: self._scopes[-1][name.lexeme] = True

	def _resolve_local(self, expr:syntax.Expr, name:str):
		depth = len(self._scopes) - 1
		for i in range(depth, -1, -1):
			if name in self._scopes[i]:
				self.distances[expr] = depth - i
				return
		# Not found: Assume it is global.

	def _resolve_function(self, fn:syntax.Function, kind:FunctionKind):
		enclosing, self._function = self._function, kind
		self._begin_scope()
		for param in fn.params:
			self._declare(param)
			self._define(param)
		self.tour(fn.body)
		self._end_scope()
		self._function = enclosing

	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()

	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_Function(self, stmt:syntax.Function):
		# Defined before the body, so that a function may call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionKind.FUNCTION)

	def visit_Return(self, stmt:syntax.Return):
		if self._function is FunctionKind.NONE:
			self.report.static_error(stmt.keyword, "Can't return from top-level code.")
		if stmt.value is not None:
			if self._function is FunctionKind.INITIALIZER:
				self.report.static_error(stmt.keyword, "Can't return a value from an initializer.")
			self.visit(stmt.value)

	def visit_Class(self, stmt:syntax.Class):
		enclosing, self._class = self._class, ClassKind.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self.report.static_error(stmt.superclass.name, "A class can't inherit from itself.")
			self._class = ClassKind.SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope()
			self._scopes[-1][SUPER] = True

		self._begin_scope()
		self._scopes[-1][THIS] = True
		for method in stmt.methods:
			if method.name.lexeme == INITIALIZER: kind = FunctionKind.INITIALIZER
			else: kind = FunctionKind.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None: self._end_scope()
		self._class = enclosing

	# Expressions

	def visit_Variable(self, expr:syntax.Variable):
		if self._scopes and self._scopes[-1].get(expr.name.lexeme) is False:
			self.report.static_error(expr.name, "Can't read local variable in its own initializer.")
		self._resolve_local(expr, expr.name.lexeme)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name.lexeme)

	def visit_This(self, expr:syntax.This):
		if self._class is ClassKind.NONE:
			self.report.static_error(expr.keyword, "Can't use 'this' outside of a class.")
			return
		self._resolve_local(expr, THIS)

	def visit_Super(self, expr:syntax.Super):
		if self._class is ClassKind.NONE:
			self.report.static_error(expr.keyword, "Can't use 'super' outside of a class.")
		elif self._class is not ClassKind.SUBCLASS:
			self.report.static_error(expr.keyword, "Can't use 'super' in a class with no superclass.")
		self._resolve_local(expr, SUPER)

def resolve_program(statements:Sequence[syntax.Stmt], report:Report) -> dict[syntax.Expr, int]:
	return Resolver(report).resolve(statements)
