"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""

from abc import ABC
from typing import NamedTuple, Any, Sequence, Union
from ..lexicon import Token


class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	pass

NATIVE_DATA = Union[None, bool, float, str]
VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[VALUE]


class Returning(NamedTuple):
	"""
	The signal a return-statement passes back up through enclosing statements.
	Statements that complete normally give None instead.
	"""
	value: Any


class LoxRuntimeError(Exception):
	""" Aborts the present run. The token says where to point the finger. """
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message


class ArityMismatch(Exception):
	""" Raised without a token; the call site supplies one. """
	def __init__(self, expected:int, given:int):
		super().__init__("Expected %d arguments but got %d." % (expected, given))
