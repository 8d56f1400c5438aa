"""
The canonical list-structured search, with one refinement:
When the resolver has already worked out how many links to follow,
`get_at` and `assign_at` go straight there.

Each environment knows its parent but never its children,
so closures keep their natal environments alive without making cycles.
"""
from typing import Any, Optional
from .ontology import Token
from .errors import UndefinedVariable

class Environment:
	def __init__(self, enclosing:Optional["Environment"]=None):
		self._values : dict[str, Any] = {}
		self.enclosing = enclosing

	def __repr__(self):
		return "<Environment %s>" % ", ".join(self._values)

	def define(self, name:str, value:Any):
		""" Bind or re-bind in this scope only. Never fails. """
		self._values[name] = value

	def get(self, name:Token) -> Any:
		env = self
		while env is not None:
			if name.lexeme in env._values: return env._values[name.lexeme]
			env = env.enclosing
		raise UndefinedVariable(name, "Undefined variable '%s'." % name.lexeme)

	def assign(self, name:Token, value:Any):
		""" Never creates a binding: Assignment to an unknown name is an error. """
		env = self
		while env is not None:
			if name.lexeme in env._values:
				env._values[name.lexeme] = value
				return
			env = env.enclosing
		raise UndefinedVariable(name, "Undefined variable '%s'." % name.lexeme)

	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance): env = env.enclosing
		return env

	# The resolver vouches for these two, so they do not check for absence.

	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance)._values[name]

	def assign_at(self, distance:int, name:Token, value:Any):
		self.ancestor(distance)._values[name.lexeme] = value
