"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence, Union
from ..ontology import Token

class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """

NATIVE_DATA = Union[None, bool, float, str]
LOX_VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[LOX_VALUE]

class Callable(LoxValue):
	"""
	The one capability shared by user functions, native functions, and classes.
	The set of implementations is closed: see `values` and `primitive`.
	"""
	@abstractmethod
	def arity(self) -> int: pass

	def admits(self, count:int) -> bool:
		""" Whether a call with this many arguments may proceed. """
		return count == self.arity()

	@abstractmethod
	def call(self, walker:Any, arguments:ARGS, site:Token) -> LOX_VALUE:
		"""
		The walker is whoever can execute statements;
		the site is the token to blame if something goes wrong.
		"""

class HasProperties(LoxValue):
	""" Anything that answers to the dot: user-defined instances and native arrays. """
	@abstractmethod
	def get_property(self, name:Token) -> LOX_VALUE: pass
