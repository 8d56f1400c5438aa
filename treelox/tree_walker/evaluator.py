"""
The tree-walker proper.

Statements and expressions are visited with the environment to work in
passed explicitly, so there is no "current environment" to save and restore:
leaving a block, by any route, simply stops using the block's environment.

A `return` statement does not raise. Executing a statement yields either
None (carry on) or a `Returning` outcome, which every enclosing statement
hands straight back up until a function call consumes it.
"""
import math
import operator
from typing import NamedTuple, Optional, Sequence
from boozetools.support.foundation import Visitor
from .. import syntax, primitive
from ..environment import Environment
from ..errors import OperandTypeError, NotCallable, ArityMismatch, NotAnInstance, UndefinedProperty, StackOverflow
from ..ontology import Kind, Token, THIS, SUPER, INITIALIZER
from .types import Callable, HasProperties, LOX_VALUE
from .values import Closure, LoxClass, LoxInstance

class Returning(NamedTuple):
	value: LOX_VALUE

OUTCOME = Optional[Returning]

def is_truthy(value:LOX_VALUE) -> bool:
	return not (value is None or value is False)

def is_equal(a:LOX_VALUE, b:LOX_VALUE) -> bool:
	# No coercion: in particular, true is not 1 even though Python thinks so.
	return type(a) is type(b) and a == b

def stringify(value:LOX_VALUE) -> str:
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if isinstance(value, float):
		if math.isnan(value): return "NaN"
		if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
		text = repr(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _divide(a:float, b:float) -> float:
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

NUMERIC_BINARY = {
	Kind.MINUS: operator.sub,
	Kind.STAR: operator.mul,
	Kind.SLASH: _divide,
	Kind.GREATER: operator.gt,
	Kind.GREATER_EQUAL: operator.ge,
	Kind.LESS: operator.lt,
	Kind.LESS_EQUAL: operator.le,
}

# Which truth-value of the left operand settles the question without the right.
SHORTCUT = {
	Kind.AND: False,
	Kind.OR: True,
}

def _is_number(value) -> bool:
	return type(value) is float

class TreeWalker(Visitor):
	globals: Environment
	distances: dict[syntax.Expr, int]

	def __init__(self, output=print):
		self.globals = Environment()
		self.distances = {}
		self._output = output
		primitive.install(self.globals)

	def note_distances(self, distances:dict[syntax.Expr, int]):
		""" The resolver's findings. A REPL adds more with every line. """
		self.distances.update(distances)

	def interpret(self, statements:Sequence[syntax.Stmt]):
		for stmt in statements:
			outcome = self.execute(stmt, self.globals)
			assert outcome is None, "The resolver should have prevented a top-level return."

	def execute(self, stmt:syntax.Stmt, env:Environment) -> OUTCOME:
		return self.visit(stmt, env)

	def evaluate(self, expr:syntax.Expr, env:Environment) -> LOX_VALUE:
		return self.visit(expr, env)

	def execute_block(self, statements:Sequence[syntax.Stmt], env:Environment) -> OUTCOME:
		for stmt in statements:
			outcome = self.visit(stmt, env)
			if outcome is not None: return outcome

	def _look_up(self, name:Token, expr:syntax.Expr, env:Environment) -> LOX_VALUE:
		distance = self.distances.get(expr)
		if distance is None: return self.globals.get(name)
		return env.get_at(distance, name.lexeme)

	###########################################################################
	# Statements

	def visit_Expression(self, stmt:syntax.Expression, env:Environment):
		self.visit(stmt.expression, env)

	def visit_Print(self, stmt:syntax.Print, env:Environment):
		self._output(stringify(self.visit(stmt.expression, env)))

	def visit_Var(self, stmt:syntax.Var, env:Environment):
		value = None if stmt.initializer is None else self.visit(stmt.initializer, env)
		env.define(stmt.name.lexeme, value)

	def visit_Block(self, stmt:syntax.Block, env:Environment) -> OUTCOME:
		return self.execute_block(stmt.statements, Environment(env))

	def visit_If(self, stmt:syntax.If, env:Environment) -> OUTCOME:
		if is_truthy(self.visit(stmt.condition, env)):
			return self.visit(stmt.then_branch, env)
		elif stmt.else_branch is not None:
			return self.visit(stmt.else_branch, env)

	def visit_While(self, stmt:syntax.While, env:Environment) -> OUTCOME:
		while is_truthy(self.visit(stmt.condition, env)):
			outcome = self.visit(stmt.body, env)
			if outcome is not None: return outcome

	def visit_Function(self, stmt:syntax.Function, env:Environment):
		env.define(stmt.name.lexeme, Closure(stmt, env, False))

	def visit_Return(self, stmt:syntax.Return, env:Environment) -> Returning:
		value = None if stmt.value is None else self.visit(stmt.value, env)
		return Returning(value)

	def visit_Class(self, stmt:syntax.Class, env:Environment):
		# The name exists (as nil) while the methods are built.
		env.define(stmt.name.lexeme, None)
		superclass = None
		body_env = env
		if stmt.superclass is not None:
			superclass = self.visit(stmt.superclass, env)
			if not isinstance(superclass, LoxClass):
				raise OperandTypeError(stmt.superclass.name, "Superclass must be a class.")
			body_env = Environment(env)
			body_env.define(SUPER, superclass)
		methods = {
			method.name.lexeme: Closure(method, body_env, method.name.lexeme == INITIALIZER)
			for method in stmt.methods
		}
		env.assign(stmt.name, LoxClass(stmt.name.lexeme, superclass, methods))

	###########################################################################
	# Expressions

	def visit_Literal(self, expr:syntax.Literal, env:Environment):
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping, env:Environment):
		return self.visit(expr.expression, env)

	def visit_Variable(self, expr:syntax.Variable, env:Environment):
		return self._look_up(expr.name, expr, env)

	def visit_Assign(self, expr:syntax.Assign, env:Environment):
		value = self.visit(expr.value, env)
		distance = self.distances.get(expr)
		if distance is None: self.globals.assign(expr.name, value)
		else: env.assign_at(distance, expr.name, value)
		return value

	def visit_Unary(self, expr:syntax.Unary, env:Environment):
		right = self.visit(expr.right, env)
		if expr.operator.kind is Kind.BANG:
			return not is_truthy(right)
		if not _is_number(right):
			raise OperandTypeError(expr.operator, "Operand must be a number.")
		return -right

	def visit_Binary(self, expr:syntax.Binary, env:Environment):
		left = self.visit(expr.left, env)
		right = self.visit(expr.right, env)
		kind = expr.operator.kind
		if kind is Kind.EQUAL_EQUAL: return is_equal(left, right)
		if kind is Kind.BANG_EQUAL: return not is_equal(left, right)
		if kind is Kind.PLUS:
			if _is_number(left) and _is_number(right): return left + right
			if isinstance(left, str) and isinstance(right, str): return left + right
			raise OperandTypeError(expr.operator, "Operands must be two numbers or two strings.")
		if not (_is_number(left) and _is_number(right)):
			raise OperandTypeError(expr.operator, "Operands must be numbers.")
		return NUMERIC_BINARY[kind](left, right)

	def visit_Logical(self, expr:syntax.Logical, env:Environment):
		left = self.visit(expr.left, env)
		if is_truthy(left) == SHORTCUT[expr.operator.kind]: return left
		return self.visit(expr.right, env)

	def visit_Call(self, expr:syntax.Call, env:Environment):
		callee = self.visit(expr.callee, env)
		arguments = [self.visit(a, env) for a in expr.arguments]
		if not isinstance(callee, Callable):
			raise NotCallable(expr.paren, "Can only call functions and classes.")
		if not callee.admits(len(arguments)):
			message = "Expected %d arguments but got %d." % (callee.arity(), len(arguments))
			raise ArityMismatch(expr.paren, message)
		try: return callee.call(self, arguments, expr.paren)
		except RecursionError:
			# The innermost call converts it; outer calls see a Lox error and let it pass.
			raise StackOverflow(expr.paren, "Stack overflow.") from None

	def visit_Get(self, expr:syntax.Get, env:Environment):
		obj = self.visit(expr.obj, env)
		if isinstance(obj, HasProperties):
			return obj.get_property(expr.name)
		raise NotAnInstance(expr.name, "Only instances have properties.")

	def visit_Set(self, expr:syntax.Set, env:Environment):
		obj = self.visit(expr.obj, env)
		if not isinstance(obj, LoxInstance):
			raise NotAnInstance(expr.name, "Only instances have fields.")
		value = self.visit(expr.value, env)
		obj.set_field(expr.name, value)
		return value

	def visit_This(self, expr:syntax.This, env:Environment):
		return self._look_up(expr.keyword, expr, env)

	def visit_Super(self, expr:syntax.Super, env:Environment):
		# Start from the class where the call is written, not the receiver's class.
		distance = self.distances[expr]
		superclass = env.get_at(distance, SUPER)
		receiver = env.get_at(distance - 1, THIS)
		method = superclass.find_method(expr.method.lexeme)
		if method is None:
			raise UndefinedProperty(expr.method, "Undefined property '%s'." % expr.method.lexeme)
		return method.bind(receiver)
