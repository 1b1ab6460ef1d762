"""
This is an interpreter for the Lox scripting language.

For example:

    lox program.lox

will run program.lox, or else explain why not.

    lox

with no script starts an interactive session. Each line you type
runs as its own little program, but they all share the same globals.
End the session with end-of-file (Ctrl-D, or Ctrl-Z on Windows).

    lox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

from .diagnostics import Report
from .executive import Session, EX_OK, EX_USAGE, EX_NOINPUT

# Lox programs recurse through several Python frames per call.
RECURSION_LIMIT = 10000

PROMPT = "> "

class _ArgumentParser(argparse.ArgumentParser):
	""" Any trouble with the arguments is a usage error, which has its own exit code. """
	def error(self, message):
		self.print_usage(sys.stderr)
		self.exit(EX_USAGE, "%s: error: %s\n" % (self.prog, message))

parser = _ArgumentParser(
	prog="lox",
	description="Interpreter for the Lox scripting language.",
)
parser.add_argument("script", nargs="*", help="Path to a script. Leave it off for an interactive session.")
parser.add_argument('-v', "--verbose", action="count", help="Illustrate each error in context, and narrate the passes.")
parser.add_argument('-p', "--print-ast", action="store_true", help="Show the syntax tree of each statement instead of running it.")

def run_file(path:Path, report:Report, print_ast:bool=False) -> int:
	report.info("Loading", path)
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
		return EX_NOINPUT
	session = Session(report)
	session.run(text, print_ast=print_ast)
	return session.exit_code()

def run_prompt(report:Report, print_ast:bool=False) -> int:
	session = Session(report)
	while True:
		try: line = input(PROMPT)
		except EOFError:
			print()
			break
		session.run(line, print_ast=print_ast)
		# Errors in one line must not poison the next.
		report.reset()
	return EX_OK

def run(args) -> int:
	if len(args.script) > 1:
		print("Usage: lox [script]", file=sys.stderr)
		return EX_USAGE
	report = Report(verbose=args.verbose)
	if args.script:
		return run_file(Path(args.script[0]), report, args.print_ast)
	else:
		return run_prompt(report, args.print_ast)

def main(argv=None):
	sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))
	sys.exit(run(parser.parse_args(argv)))
