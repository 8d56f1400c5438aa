"""
The built-in namespace: native functions, and the one native data structure.

A native is any Python function whose first parameter receives the
token of the call site (for blaming errors) and whose remaining parameters
receive the Lox arguments. Arity comes from the Python signature.
"""
import time
from inspect import signature
from .environment import Environment
from .errors import OperandTypeError, IndexOutOfRange, UndefinedProperty
from .ontology import Token
from .tree_walker.types import Callable, HasProperties, ARGS, LOX_VALUE

class Native(Callable):
	def __init__(self, fn:callable):
		self._fn = fn
		self._arity = len(signature(fn).parameters) - 1

	def __str__(self): return "<native fn>"

	def arity(self) -> int: return self._arity

	def call(self, walker, arguments:ARGS, site:Token) -> LOX_VALUE:
		return self._fn(site, *arguments)

class NativeArray(HasProperties):
	"""
	Fixed length, zero-based, filled with nil.
	Indices are checked, so a bad one is a run-time error rather than a crash.
	"""
	def __init__(self, length:int):
		self._items = [None] * length
		self._methods = {"get": Native(self._get), "set": Native(self._set)}

	def __str__(self): return "<native array>"

	def get_property(self, name:Token) -> LOX_VALUE:
		if name.lexeme == "length": return float(len(self._items))
		try: return self._methods[name.lexeme]
		except KeyError: raise UndefinedProperty(name, "Undefined property '%s'." % name.lexeme) from None

	def _get(self, site:Token, index):
		return self._items[_check_index(site, index, len(self._items))]

	def _set(self, site:Token, index, value):
		self._items[_check_index(site, index, len(self._items))] = value
		return value

def _check_index(site:Token, index, length) -> int:
	if type(index) is not float or not index.is_integer():
		raise OperandTypeError(site, "Array index must be a whole number.")
	if not 0 <= index < length:
		raise IndexOutOfRange(site, "Array index out of range.")
	return int(index)

def _clock(site:Token):
	return time.time()

def _builtin_check_index(site:Token, index, length):
	""" For collections written in Lox, whose capacity exceeds their length. """
	if type(length) is not float:
		raise OperandTypeError(site, "Array length must be a number.")
	return float(_check_index(site, index, length))

def _builtin_array(site:Token, length):
	if type(length) is not float or not length.is_integer() or length < 0:
		raise OperandTypeError(site, "Array length must be a non-negative whole number.")
	return NativeArray(int(length))

NATIVES = {
	"clock": _clock,
	"builtin_array": _builtin_array,
	"builtin_check_index": _builtin_check_index,
}

def install(env:Environment):
	for name, fn in NATIVES.items():
		env.define(name, Native(fn))
