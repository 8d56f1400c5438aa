"""
Run-time errors. Each carries the token to blame and a human-readable message.
None of these is caught inside the tree-walker: they propagate to the executive,
which files them with the report and abandons the rest of the program.
"""
from .ontology import Token

class LoxRuntimeError(Exception):
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message

class UndefinedVariable(LoxRuntimeError): pass
class OperandTypeError(LoxRuntimeError): pass
class NotCallable(LoxRuntimeError): pass
class ArityMismatch(LoxRuntimeError): pass
class NotAnInstance(LoxRuntimeError): pass
class UndefinedProperty(LoxRuntimeError): pass
class IndexOutOfRange(LoxRuntimeError): pass
class StackOverflow(LoxRuntimeError): pass
