"""
This is an interpreter for the Lox programming language.

For example:

    treelox program.lox

will run program.lox if possible, or else try to explain why not.

    treelox

with no program starts an interactive session; end it with end-of-file.

    treelox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

# Exit statuses, after the BSD sysexits convention:
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

parser = argparse.ArgumentParser(
	prog="treelox",
	description="Tree-walking interpreter for the Lox programming language.",
)
parser.add_argument("program", nargs="?", help="A .lox file to run. Omit for an interactive session.")
parser.add_argument('-c', "--check", action="store_true", help="Parse and resolve the program, but do not actually run it.")
parser.add_argument('-p', "--print-ast", action="store_true", help="Print the syntax tree of each top-level statement before running.")
parser.add_argument('-v', "--verbose", action="count", help="Narrate the phases on stderr.")

def run(args, output=print) -> int:
	from .diagnostics import Report
	from .pretty import render
	from .tree_walker.executive import Executive, Yuck
	report = Report(verbose=args.verbose)
	executive = Executive(report, output=output)
	path = Path.cwd() / args.program
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
		return EX_USAGE
	try:
		statements, distances = executive.prepare(text, path)
		if args.print_ast:
			for stmt in statements: print(render(stmt), file=sys.stderr)
		if args.check:
			print("Looks plausible to me.", file=sys.stderr)
			return 0
		executive.run_program(statements, distances)
	except Yuck as ex:
		report.complain_to_console()
		return EX_SOFTWARE if ex.args[0] == "runtime" else EX_DATAERR
	return 0

def repl(args, output=print, read=input) -> int:
	"""
	One line at a time against persistent globals.
	Errors are reported and forgotten; the session carries on.
	"""
	from .diagnostics import Report
	from .pretty import render
	from .tree_walker.executive import Executive, Yuck
	report = Report(verbose=args.verbose)
	executive = Executive(report, output=output)
	while True:
		try: line = read("> ")
		except EOFError: break
		try:
			statements, distances = executive.prepare(line)
			if args.print_ast:
				for stmt in statements: print(render(stmt), file=sys.stderr)
			if not args.check:
				executive.run_program(statements, distances)
		except Yuck:
			report.complain_to_console()
		report.reset()
	return 0

def main():
	args = parser.parse_args()
	if args.program is None:
		sys.exit(repl(args))
	else:
		sys.exit(run(args))
