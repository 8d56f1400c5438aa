"""
Source text in, statement list out.

The scanner and parser are deliberately plain: a character-at-a-time scanner
and a recursive-descent parser, one method per grammar rule.
Both report trouble to the `Report` and keep going,
so that one run can turn up several mistakes.
"""
import sys
from pathlib import Path
from typing import Optional
from boozetools.support.failureprone import SourceText

from . import syntax
from .diagnostics import Report
from .ontology import Kind, Token, KEYWORDS

MAX_ARGUMENTS = 255

_PUNCTUATION = {
	'(': Kind.LEFT_PAREN, ')': Kind.RIGHT_PAREN,
	'{': Kind.LEFT_BRACE, '}': Kind.RIGHT_BRACE,
	',': Kind.COMMA, '.': Kind.DOT, ';': Kind.SEMICOLON,
	'-': Kind.MINUS, '+': Kind.PLUS, '*': Kind.STAR,
}

# A character that may be followed by '=' to make a different token:
_RELOPS = {
	'!': (Kind.BANG, Kind.BANG_EQUAL),
	'=': (Kind.EQUAL, Kind.EQUAL_EQUAL),
	'<': (Kind.LESS, Kind.LESS_EQUAL),
	'>': (Kind.GREATER, Kind.GREATER_EQUAL),
}

class Scanner:
	def __init__(self, text:str, report:Report, source:Optional[SourceText]=None):
		self._text = text
		self._report = report
		self._source = source
		self._tokens = []
		self._start = 0
		self._current = 0
		self._line = 1

	def scan_tokens(self) -> list[Token]:
		while not self._at_end():
			self._start = self._current
			self._scan_token()
		self._tokens.append(Token(Kind.EOF, "", None, self._line, len(self._text), self._source))
		return self._tokens

	def _at_end(self): return self._current >= len(self._text)

	def _advance(self) -> str:
		c = self._text[self._current]
		self._current += 1
		return c

	def _peek(self) -> str:
		return '' if self._at_end() else self._text[self._current]

	def _peek_next(self) -> str:
		at = self._current + 1
		return self._text[at] if at < len(self._text) else ''

	def _match(self, expected:str) -> bool:
		if self._peek() == expected:
			self._current += 1
			return True
		return False

	def _scan_token(self):
		c = self._advance()
		if c in _PUNCTUATION: self._add(_PUNCTUATION[c])
		elif c in _RELOPS:
			alone, with_equal = _RELOPS[c]
			self._add(with_equal if self._match('=') else alone)
		elif c == '/':
			if self._match('/'):
				while self._peek() not in ('\n', ''): self._advance()
			else:
				self._add(Kind.SLASH)
		elif c in ' \r\t': pass
		elif c == '\n': self._line += 1
		elif c == '"': self._string()
		elif _is_digit(c): self._number()
		elif _is_alpha(c): self._identifier()
		else: self._report.unexpected_character(self._line, self._start, c)

	def _string(self):
		line = self._line
		while self._peek() not in ('"', ''):
			if self._peek() == '\n': self._line += 1
			self._advance()
		if self._at_end():
			self._report.unterminated_string(line, self._start)
			return
		self._advance()  # The closing quote
		self._add(Kind.STRING, self._text[self._start + 1:self._current - 1], line)

	def _number(self):
		while _is_digit(self._peek()): self._advance()
		if self._peek() == '.' and _is_digit(self._peek_next()):
			self._advance()
			while _is_digit(self._peek()): self._advance()
		self._add(Kind.NUMBER, float(self._text[self._start:self._current]))

	def _identifier(self):
		while _is_alpha(self._peek()) or _is_digit(self._peek()): self._advance()
		text = sys.intern(self._text[self._start:self._current])
		self._add(KEYWORDS.get(text, Kind.IDENTIFIER))

	def _add(self, kind:Kind, literal=None, line=None):
		lexeme = self._text[self._start:self._current]
		self._tokens.append(Token(kind, lexeme, literal, line or self._line, self._start, self._source))

def _is_alpha(c:str) -> bool:
	return c == '_' or ('a' <= c <= 'z') or ('A' <= c <= 'Z')

def _is_digit(c:str) -> bool:
	# ASCII only. str.isdigit also admits superscripts and the digits of other scripts.
	return '0' <= c <= '9'

###############################################################################

class ParseError(Exception):
	""" Unwinds the parser to the nearest statement boundary. Never escapes the parser. """

_STATEMENT_STARTERS = frozenset([
	Kind.CLASS, Kind.FUN, Kind.VAR, Kind.FOR,
	Kind.IF, Kind.WHILE, Kind.PRINT, Kind.RETURN,
])

class Parser:
	"""
	The grammar, from loosest to tightest binding:

		program     → declaration* EOF
		declaration → classDecl | funDecl | varDecl | statement
		statement   → exprStmt | forStmt | ifStmt | printStmt | returnStmt | whileStmt | block
		expression  → assignment
		assignment  → ( call "." )? IDENTIFIER "=" assignment | logic_or
		logic_or    → logic_and ( "or" logic_and )*
		logic_and   → equality ( "and" equality )*
		equality    → comparison ( ( "!=" | "==" ) comparison )*
		comparison  → term ( ( ">" | ">=" | "<" | "<=" ) term )*
		term        → factor ( ( "-" | "+" ) factor )*
		factor      → unary ( ( "/" | "*" ) unary )*
		unary       → ( "!" | "-" ) unary | call
		call        → primary ( "(" arguments? ")" | "." IDENTIFIER )*
		primary     → literal | IDENTIFIER | "(" expression ")" | "this" | "super" "." IDENTIFIER
	"""
	def __init__(self, tokens:list[Token], report:Report):
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[syntax.Stmt]:
		statements = []
		while not self._at_end():
			try: stmt = self._declaration()
			except RecursionError:
				self._report.parse_error(self._peek(), "Nested too deeply.")
				break
			if stmt is not None: statements.append(stmt)
		return statements

	def parse_expression(self) -> Optional[syntax.Expr]:
		""" For the pretty-printer's benefit: one bare expression. """
		try: return self._expression()
		except ParseError: return None

	# Declarations

	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match(Kind.CLASS): return self._class_declaration()
			if self._match(Kind.FUN): return self._function("function")
			if self._match(Kind.VAR): return self._var_declaration()
			return self._statement()
		except ParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.Class:
		name = self._consume(Kind.IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match(Kind.LESS):
			self._consume(Kind.IDENTIFIER, "Expect superclass name.")
			superclass = syntax.Variable(self._previous())
		self._consume(Kind.LEFT_BRACE, "Expect '{' before class body.")
		methods = []
		while not self._check(Kind.RIGHT_BRACE) and not self._at_end():
			methods.append(self._function("method"))
		self._consume(Kind.RIGHT_BRACE, "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def _function(self, kind:str) -> syntax.Function:
		name = self._consume(Kind.IDENTIFIER, "Expect %s name." % kind)
		self._consume(Kind.LEFT_PAREN, "Expect '(' after %s name." % kind)
		params = []
		if not self._check(Kind.RIGHT_PAREN):
			while True:
				if len(params) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGUMENTS)
				params.append(self._consume(Kind.IDENTIFIER, "Expect parameter name."))
				if not self._match(Kind.COMMA): break
		self._consume(Kind.RIGHT_PAREN, "Expect ')' after parameters.")
		self._consume(Kind.LEFT_BRACE, "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())

	def _var_declaration(self) -> syntax.Var:
		name = self._consume(Kind.IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match(Kind.EQUAL) else None
		self._consume(Kind.SEMICOLON, "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	# Statements

	def _statement(self) -> syntax.Stmt:
		if self._match(Kind.FOR): return self._for_statement()
		if self._match(Kind.IF): return self._if_statement()
		if self._match(Kind.PRINT): return self._print_statement()
		if self._match(Kind.RETURN): return self._return_statement()
		if self._match(Kind.WHILE): return self._while_statement()
		if self._match(Kind.LEFT_BRACE): return syntax.Block(self._block())
		return self._expression_statement()

	def _for_statement(self) -> syntax.Stmt:
		"""
		There is no `for` node. The loop becomes
			{ initializer; while (condition) { body; increment; } }
		which gives the loop variable its own scope, as it should.
		"""
		self._consume(Kind.LEFT_PAREN, "Expect '(' after 'for'.")
		if self._match(Kind.SEMICOLON): initializer = None
		elif self._match(Kind.VAR): initializer = self._var_declaration()
		else: initializer = self._expression_statement()

		condition = None if self._check(Kind.SEMICOLON) else self._expression()
		self._consume(Kind.SEMICOLON, "Expect ';' after loop condition.")
		increment = None if self._check(Kind.RIGHT_PAREN) else self._expression()
		self._consume(Kind.RIGHT_PAREN, "Expect ')' after for clauses.")
		body = self._statement()

		if increment is not None:
			body = syntax.Block([body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True)
		body = syntax.While(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body

	def _if_statement(self) -> syntax.If:
		self._consume(Kind.LEFT_PAREN, "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(Kind.RIGHT_PAREN, "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match(Kind.ELSE) else None
		return syntax.If(condition, then_branch, else_branch)

	def _print_statement(self) -> syntax.Print:
		value = self._expression()
		self._consume(Kind.SEMICOLON, "Expect ';' after value.")
		return syntax.Print(value)

	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(Kind.SEMICOLON) else self._expression()
		self._consume(Kind.SEMICOLON, "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def _while_statement(self) -> syntax.While:
		self._consume(Kind.LEFT_PAREN, "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(Kind.RIGHT_PAREN, "Expect ')' after condition.")
		return syntax.While(condition, self._statement())

	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check(Kind.RIGHT_BRACE) and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume(Kind.RIGHT_BRACE, "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume(Kind.SEMICOLON, "Expect ';' after expression.")
		return syntax.Expression(expr)

	# Expressions

	def _expression(self) -> syntax.Expr:
		return self._assignment()

	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match(Kind.EQUAL):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.obj, expr.name, value)
			# Report, but no need to synchronize: the parser is not confused.
			self._report.parse_error(equals, "Invalid assignment target.")
		return expr

	def _or(self) -> syntax.Expr:
		expr = self._and()
		while self._match(Kind.OR):
			operator = self._previous()
			expr = syntax.Logical(expr, operator, self._and())
		return expr

	def _and(self) -> syntax.Expr:
		expr = self._equality()
		while self._match(Kind.AND):
			operator = self._previous()
			expr = syntax.Logical(expr, operator, self._equality())
		return expr

	def _binary(self, operand, *kinds) -> syntax.Expr:
		expr = operand()
		while self._match(*kinds):
			operator = self._previous()
			expr = syntax.Binary(expr, operator, operand())
		return expr

	def _equality(self):
		return self._binary(self._comparison, Kind.BANG_EQUAL, Kind.EQUAL_EQUAL)

	def _comparison(self):
		return self._binary(self._term, Kind.GREATER, Kind.GREATER_EQUAL, Kind.LESS, Kind.LESS_EQUAL)

	def _term(self):
		return self._binary(self._factor, Kind.MINUS, Kind.PLUS)

	def _factor(self):
		return self._binary(self._unary, Kind.SLASH, Kind.STAR)

	def _unary(self) -> syntax.Expr:
		if self._match(Kind.BANG, Kind.MINUS):
			operator = self._previous()
			return syntax.Unary(operator, self._unary())
		return self._call()

	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match(Kind.LEFT_PAREN):
				expr = self._finish_call(expr)
			elif self._match(Kind.DOT):
				name = self._consume(Kind.IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		arguments = []
		if not self._check(Kind.RIGHT_PAREN):
			while True:
				if len(arguments) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGUMENTS)
				arguments.append(self._expression())
				if not self._match(Kind.COMMA): break
		paren = self._consume(Kind.RIGHT_PAREN, "Expect ')' after arguments.")
		return syntax.Call(callee, paren, arguments)

	def _primary(self) -> syntax.Expr:
		if self._match(Kind.FALSE): return syntax.Literal(False)
		if self._match(Kind.TRUE): return syntax.Literal(True)
		if self._match(Kind.NIL): return syntax.Literal(None)
		if self._match(Kind.NUMBER, Kind.STRING): return syntax.Literal(self._previous().literal)
		if self._match(Kind.SUPER):
			keyword = self._previous()
			self._consume(Kind.DOT, "Expect '.' after 'super'.")
			method = self._consume(Kind.IDENTIFIER, "Expect superclass method name.")
			return syntax.Super(keyword, method)
		if self._match(Kind.THIS): return syntax.This(self._previous())
		if self._match(Kind.IDENTIFIER): return syntax.Variable(self._previous())
		if self._match(Kind.LEFT_PAREN):
			expr = self._expression()
			self._consume(Kind.RIGHT_PAREN, "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(self._peek(), "Expect expression.")

	# Plumbing

	def _match(self, *kinds:Kind) -> bool:
		for kind in kinds:
			if self._check(kind):
				self._advance()
				return True
		return False

	def _check(self, kind:Kind) -> bool:
		return not self._at_end() and self._peek().kind is kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _at_end(self) -> bool: return self._peek().kind is Kind.EOF
	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]

	def _consume(self, kind:Kind, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _error(self, token:Token, message:str) -> ParseError:
		self._report.parse_error(token, message)
		return ParseError()

	def _synchronize(self):
		""" Discard tokens until what is probably the start of the next statement. """
		self._advance()
		while not self._at_end():
			if self._previous().kind is Kind.SEMICOLON: return
			if self._peek().kind in _STATEMENT_STARTERS: return
			self._advance()

###############################################################################

def scan_text(text:str, report:Report, source:Optional[SourceText]=None) -> list[Token]:
	return Scanner(text, report, source).scan_tokens()

def parse_text(text:str, path:Optional[Path], report:Report) -> list[syntax.Stmt]:
	"""
	Scan and parse; the caller checks the report before doing anything
	with the result, which may be partial if there were errors.
	"""
	source = report.set_source(text, path)
	tokens = scan_text(text, report, source)
	return Parser(tokens, report).parse()
