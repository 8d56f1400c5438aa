"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but functions, classes and instances need more help.
"""
from typing import Optional
from .. import syntax
from ..environment import Environment
from ..errors import UndefinedProperty
from ..ontology import Token, THIS, INITIALIZER
from .types import Callable, HasProperties, ARGS, LOX_VALUE

class Closure(Callable):
	""" The run-time manifestation of a function: a callable value tied to its natal environment. """

	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool):
		self._declaration = declaration
		self._closure = closure
		self._is_initializer = is_initializer

	def __str__(self): return "<fn %s>" % self._declaration.name.lexeme

	def arity(self) -> int: return len(self._declaration.params)

	def bind(self, instance:"LoxInstance") -> "Closure":
		""" A method specialized to one receiver: `this` lives one scope outside the call. """
		env = Environment(self._closure)
		env.define(THIS, instance)
		return Closure(self._declaration, env, self._is_initializer)

	def call(self, walker, arguments:ARGS, site:Token) -> LOX_VALUE:
		env = Environment(self._closure)
		for param, argument in zip(self._declaration.params, arguments):
			env.define(param.lexeme, argument)
		outcome = walker.execute_block(self._declaration.body, env)
		# An initializer yields its instance no matter how the body finished.
		if self._is_initializer: return self._closure.get_at(0, THIS)
		if outcome is None: return None
		return outcome.value

class LoxClass(Callable):
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self): return "<class %s>" % self.name

	def find_method(self, name:str) -> Optional[Closure]:
		cls = self
		while cls is not None:
			if name in cls._methods: return cls._methods[name]
			cls = cls.superclass

	def arity(self) -> int:
		initializer = self.find_method(INITIALIZER)
		return 0 if initializer is None else initializer.arity()

	def admits(self, count:int) -> bool:
		# Without an initializer, any arguments are quietly ignored.
		initializer = self.find_method(INITIALIZER)
		return initializer is None or count == initializer.arity()

	def call(self, walker, arguments:ARGS, site:Token) -> "LoxInstance":
		instance = LoxInstance(self)
		initializer = self.find_method(INITIALIZER)
		if initializer is not None:
			initializer.bind(instance).call(walker, arguments, site)
		return instance

class LoxInstance(HasProperties):
	def __init__(self, cls:LoxClass):
		self.cls = cls
		self._fields = {}

	def __str__(self): return "<instanceof %s>" % self.cls

	def get_property(self, name:Token) -> LOX_VALUE:
		if name.lexeme in self._fields:
			return self._fields[name.lexeme]
		method = self.cls.find_method(name.lexeme)
		if method is not None:
			return method.bind(self)
		raise UndefinedProperty(name, "Undefined property '%s'." % name.lexeme)

	def set_field(self, name:Token, value:LOX_VALUE):
		self._fields[name.lexeme] = value
