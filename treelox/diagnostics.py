"""
The one place where complaints accumulate.

Scanner, parser and resolver each make entries here instead of setting
global flags; the executive inspects the report between phases and refuses to
run a program with issues. Run-time errors land here too, so the
command-line can tell the two tiers apart when picking an exit status.
"""
import sys, random
from pathlib import Path
from typing import Optional
from boozetools.support.failureprone import SourceText, illustration

from .ontology import Token, Kind

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'Blargh', 'Confound it', 'Crud', 'Curses', 'Drat',
		'Fiddlesticks', 'Good Grief', 'Great Scott', 'Jeepers',
		'Nuts', 'Rats', 'Snap', 'Zounds',
	]

	resignations = [
		'I cannot continue.',
		'That program will not run as written.',
		'Something needs a second look.',
		'Here is what went wrong.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._source = SourceText("")
		self._runtime_failure = False

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	def failed_at_runtime(self): return self._runtime_failure

	@property
	def issues(self) -> list["Pic"]: return list(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)

	def reset(self):
		""" A REPL calls this between inputs. """
		self._issues.clear()
		self._runtime_failure = False

	def set_source(self, text:str, path:Optional[Path]=None) -> SourceText:
		""" Scanner complaints illustrate this text. Tokens carry their own. """
		self._source = SourceText(text, filename=str(path) if path else None)
		return self._source

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the scanner calls:
	def unexpected_character(self, line:int, start:int, char:str):
		intro = "[line %d] Error: Unexpected character %r." % (line, char)
		ann = Annotation(self._source, line, start, len(char))
		self.issue(Pic(intro, [ann]))

	def unterminated_string(self, line:int, start:int):
		intro = "[line %d] Error: Unterminated string." % line
		ann = Annotation(self._source, line, start, 1, "This string never ends.")
		self.issue(Pic(intro, [ann]))

	# Methods the parser and resolver call:
	def parse_error(self, token:Token, message:str):
		self.static_error(token, message)

	def static_error(self, token:Token, message:str):
		if token.kind is Kind.EOF:
			intro = "[line %d] Error at end: %s" % (token.line, message)
			self.issue(Pic(intro, []))
		else:
			intro = "[line %d] Error at '%s': %s" % (token.line, token.lexeme, message)
			self.issue(Pic(intro, [Annotation.of_token(self._source, token)]))

	# Method the executive calls when a run-time error escapes the program:
	def runtime_error(self, error):
		self._runtime_failure = True
		token = error.token
		intro = "%s\n[line %d]" % (error.message, token.line)
		self.issue(Pic(intro, [Annotation.of_token(self._source, token)]))

	def stack_overflow(self, activity:str, at_runtime:bool):
		""" For when the host runs out of stack somewhere other than a Lox call. """
		self._runtime_failure = self._runtime_failure or at_runtime
		self.issue(Pic("Error: Stack overflow while %s." % activity, []))

class Annotation:
	"""
	Points at a stretch of one source line. Rendering waits until
	someone actually wants to see it, so tests pay nothing for it.
	"""
	def __init__(self, source:SourceText, line:int, start:int, width:int, caption:str=""):
		self.source = source
		self.line = line
		self.start = start
		self.width = width
		self.caption = caption

	@staticmethod
	def of_token(fallback:SourceText, token:Token, caption:str=""):
		source = fallback if token.source is None else token.source
		return Annotation(source, token.line, token.start, len(token.lexeme), caption)

	@property
	def path(self): return self.source.filename

	def illustrate(self):
		row, col = self.source.find_row_col(self.start)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, self.width, prefix='% 6d |' % self.line, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self.intro, self._anns, self._footer = intro, anns, footer
	def __str__(self): return self.intro
	def as_text(self):
		lines = [self.intro]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				if path is not None: lines.append(path)
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
