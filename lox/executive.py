"""
The overall control for a session: string the passes together.

A session holds one report and one interpreter, so whatever a run
defines at top level remains visible to the next run. That is what
makes an interactive session work.
"""
import sys
from typing import Optional, TextIO
from .diagnostics import Report
from .scanner import scan
from .front_end import parse_tokens, TOO_DEEP
from .resolution import resolve_program
from .tree_walker.evaluator import Interpreter
from .pretty import render

# Exit codes, after the BSD sysexits convention.
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

class Session:
	def __init__(self, report:Report, stdout:Optional[TextIO]=None):
		self.report = report
		self._stdout = stdout
		self.interpreter = Interpreter(report, stdout)
	
	def run(self, source:str, *, print_ast:bool=False):
		"""
		Run one program: a whole file, or one line of interactive input.
		Any static error means nothing at all gets executed.
		"""
		report = self.report
		report.begin(source)
		tokens = scan(source, report)
		report.info("Scanned", len(tokens), "tokens.")
		statements = parse_tokens(tokens, report)
		report.info("Parsed", len(statements), "top-level statements.")
		if report.sick(): return
		depths = resolve_program(statements, report)
		report.info("Resolved", len(depths), "local references.")
		if report.sick(): return
		if print_ast:
			for stmt in statements:
				try: text = render(stmt)
				except RecursionError:
					report.error_at(stmt.start, TOO_DEEP)
					return
				print(text, file=self._stdout or sys.stdout)
		else:
			self.interpreter.interpret(statements, depths)
	
	def exit_code(self) -> int:
		""" Static errors outrank run-time errors, which could not have happened anyway. """
		if self.report.had_error: return EX_DATAERR
		if self.report.had_runtime_error: return EX_SOFTWARE
		return EX_OK
