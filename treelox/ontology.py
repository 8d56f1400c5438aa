"""
The most fundamental vocabulary: tokens, their kinds, and the handful of
words that carry special meaning to the resolver and the run-time.
These live apart from the syntax tree to avoid circular imports,
since the scanner, the parser, the diagnostics, and the tree-walker all need them.
"""
from enum import Enum, auto
from typing import Any, NamedTuple

class Kind(Enum):
	# Single-character punctuation
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()
	COMMA = auto()
	DOT = auto()
	MINUS = auto()
	PLUS = auto()
	SEMICOLON = auto()
	SLASH = auto()
	STAR = auto()

	# One or two characters
	BANG = auto()
	BANG_EQUAL = auto()
	EQUAL = auto()
	EQUAL_EQUAL = auto()
	GREATER = auto()
	GREATER_EQUAL = auto()
	LESS = auto()
	LESS_EQUAL = auto()

	# Literals
	IDENTIFIER = auto()
	STRING = auto()
	NUMBER = auto()

	# Reserved words
	AND = auto()
	CLASS = auto()
	ELSE = auto()
	FALSE = auto()
	FUN = auto()
	FOR = auto()
	IF = auto()
	NIL = auto()
	OR = auto()
	PRINT = auto()
	RETURN = auto()
	SUPER = auto()
	THIS = auto()
	TRUE = auto()
	VAR = auto()
	WHILE = auto()

	EOF = auto()

KEYWORDS = {
	kind.name.lower(): kind
	for kind in (
		Kind.AND, Kind.CLASS, Kind.ELSE, Kind.FALSE, Kind.FUN, Kind.FOR,
		Kind.IF, Kind.NIL, Kind.OR, Kind.PRINT, Kind.RETURN, Kind.SUPER,
		Kind.THIS, Kind.TRUE, Kind.VAR, Kind.WHILE,
	)
}

class Token(NamedTuple):
	"""
	One lexeme of source text. The `start` offset and the `source` are only for
	illustrating diagnostics; everything else goes by `line`.
	The source travels with the token because a program may call into
	code that came from some other text, such as the preamble or an earlier REPL line.
	"""
	kind: Kind
	lexeme: str
	literal: Any
	line: int
	start: int = 0
	source: Any = None

	def __str__(self): return "%s %s %s" % (self.kind.name, self.lexeme, self.literal)
	def stop(self): return self.start + len(self.lexeme)

# Words the resolver and the run-time treat specially:
THIS = "this"
SUPER = "super"
INITIALIZER = "init"
