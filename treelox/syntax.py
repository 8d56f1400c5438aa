"""
The set of parse-nodes in simple form.
The parser calls these constructors as it descends through the grammar.
Nothing downstream modifies a node once it is built:
Later passes keep their findings in side-tables keyed by node identity,
which is why none of these classes define __eq__ or __hash__.
"""
from typing import Any, Optional, Sequence
from .ontology import Token

class Expr:
	""" Something that evaluates to a value. """

class Stmt:
	""" Something executed for its effect. """

###############################################################################

class Literal(Expr):
	def __init__(self, value: Any):
		self.value = value
	def __repr__(self): return "<Literal %r>" % self.value

class Variable(Expr):
	def __init__(self, name: Token):
		self.name = name
	def __repr__(self): return "<Variable %s>" % self.name.lexeme

class Assign(Expr):
	def __init__(self, name: Token, value: Expr):
		self.name, self.value = name, value

class Binary(Expr):
	def __init__(self, left: Expr, operator: Token, right: Expr):
		self.left, self.operator, self.right = left, operator, right

class Logical(Expr):
	""" Short-circuiting `and` / `or` """
	def __init__(self, left: Expr, operator: Token, right: Expr):
		self.left, self.operator, self.right = left, operator, right

class Unary(Expr):
	def __init__(self, operator: Token, right: Expr):
		self.operator, self.right = operator, right

class Grouping(Expr):
	def __init__(self, expression: Expr):
		self.expression = expression

class Call(Expr):
	# The closing paren is kept to attribute run-time errors to the call site.
	def __init__(self, callee: Expr, paren: Token, arguments: Sequence[Expr]):
		self.callee, self.paren, self.arguments = callee, paren, arguments

class Get(Expr):
	def __init__(self, obj: Expr, name: Token):
		self.obj, self.name = obj, name

class Set(Expr):
	def __init__(self, obj: Expr, name: Token, value: Expr):
		self.obj, self.name, self.value = obj, name, value

class This(Expr):
	def __init__(self, keyword: Token):
		self.keyword = keyword

class Super(Expr):
	def __init__(self, keyword: Token, method: Token):
		self.keyword, self.method = keyword, method

###############################################################################

class Expression(Stmt):
	def __init__(self, expression: Expr):
		self.expression = expression

class Print(Stmt):
	def __init__(self, expression: Expr):
		self.expression = expression

class Var(Stmt):
	def __init__(self, name: Token, initializer: Optional[Expr]):
		self.name, self.initializer = name, initializer
	def __repr__(self): return "<var %s>" % self.name.lexeme

class Block(Stmt):
	def __init__(self, statements: Sequence[Stmt]):
		self.statements = statements

class If(Stmt):
	def __init__(self, condition: Expr, then_branch: Stmt, else_branch: Optional[Stmt]):
		self.condition = condition
		self.then_branch = then_branch
		self.else_branch = else_branch

class While(Stmt):
	def __init__(self, condition: Expr, body: Stmt):
		self.condition, self.body = condition, body

class Function(Stmt):
	""" Serves for both free-standing functions and methods. """
	def __init__(self, name: Token, params: Sequence[Token], body: Sequence[Stmt]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self):
		p = ", ".join(t.lexeme for t in self.params)
		return "{fun %s(%s)}" % (self.name.lexeme, p)

class Return(Stmt):
	def __init__(self, keyword: Token, value: Optional[Expr]):
		self.keyword, self.value = keyword, value

class Class(Stmt):
	def __init__(self, name: Token, superclass: Optional[Variable], methods: Sequence[Function]):
		self.name = name
		self.superclass = superclass
		self.methods = methods
	def __repr__(self): return "{class %s}" % self.name.lexeme
