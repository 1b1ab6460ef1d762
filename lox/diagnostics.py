"""
The run-context for error reporting.

One Report lives for one session: a single script run, or a whole
interactive session. The scanner, parser, resolver, and evaluator all
complain through it. It remembers whether anything went wrong, so the
caller can decide whether to proceed and what exit code to give.
"""
import sys
from typing import Optional, TextIO
from boozetools.support.failureprone import SourceText, illustration

from .lexicon import Token

class Report:
	issues: list[str]
	had_error: bool
	had_runtime_error: bool
	
	def __init__(self, *, verbose:int=0, stderr:Optional[TextIO]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._stderr = stderr
		self._source = SourceText("")
		self._length = 0
		self.issues = []
		self.had_error = False
		self.had_runtime_error = False
	
	def ok(self): return not self.had_error
	def sick(self): return self.had_error
	
	def reset(self):
		""" Between lines of interactive input. The global environment stays put. """
		self.issues.clear()
		self.had_error = False
		self.had_runtime_error = False
	
	def begin(self, text:str):
		""" Remember the text of the present run, for illustrating where things went wrong. """
		self._source = SourceText(text)
		self._length = len(text)
	
	def info(self, *args):
		if self._verbose:
			print(*args, file=self._sink())
	
	def _sink(self) -> TextIO:
		return self._stderr or sys.stderr
	
	def _emit(self, message:str, offset:Optional[int]=None, width:int=0):
		self.issues.append(message)
		sink = self._sink()
		print(message, file=sink)
		if self._verbose and offset is not None and offset <= self._length:
			print(self._illustrate(offset, width), file=sink)
	
	def _illustrate(self, offset:int, width:int) -> str:
		row, col = self._source.find_row_col(offset)
		single_line = self._source.line_of_text(row)
		return illustration(single_line, col, width, prefix='% 6d |' % row)
	
	# Methods the scanner calls:
	def lexical_error(self, line:int, offset:int, message:str):
		self.had_error = True
		self._emit("[line %d] Error: %s" % (line, message), offset, 1)
	
	# Methods the parser and resolver call:
	def error_at(self, token:Token, message:str):
		self.had_error = True
		if token.is_end(): where = " at end"
		else: where = " at '%s'" % token.lexeme
		self._emit("[line %d] Error%s: %s" % (token.line, where, message), token.offset, len(token.lexeme))
	
	# Method the evaluator calls:
	def runtime_error(self, token:Token, message:str):
		self.had_runtime_error = True
		self._emit("%s\n[line %d]" % (message, token.line), token.offset, len(token.lexeme))
