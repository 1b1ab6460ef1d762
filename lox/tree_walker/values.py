"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves: nil is None, booleans are bool,
every number is a float, and strings are str. Special things like closures need more help.
"""
import time
from abc import abstractmethod
from typing import Callable as PythonFunction, Optional
from .. import syntax
from ..lexicon import Token, INITIALIZER_NAME
from ..environment import Environment
from .types import LoxValue, VALUE, ARGS, LoxRuntimeError

class Callable(LoxValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass
	
	@abstractmethod
	def call(self, interpreter, args:ARGS) -> VALUE:
		""" The caller has already checked the number of arguments. """
		pass

class Primitive(Callable):
	""" A function supplied by the host rather than written in Lox. """
	def __init__(self, name:str, arity:int, fn:PythonFunction):
		self.name = name
		self._arity = arity
		self._fn = fn
	
	def __str__(self): return "<native fn>"
	
	def arity(self) -> int: return self._arity
	
	def call(self, interpreter, args:ARGS) -> VALUE:
		return self._fn(*args)

def _clock() -> float:
	return time.time()

PRIMITIVES = [
	Primitive("clock", 0, _clock),
]

class Closure(Callable):
	""" The run-time manifestation of a function declaration: a callable value tied to its natal environment. """
	
	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool):
		self._declaration = declaration
		self._closure = closure
		self._is_initializer = is_initializer
	
	def __str__(self): return "<fn %s>" % self._declaration.name.lexeme
	
	def arity(self) -> int: return len(self._declaration.params)
	
	def bind(self, instance:"Instance") -> "Closure":
		""" A method, bound to its receiver: one more environment, holding just "this". """
		env = Environment(self._closure)
		env.define("this", instance)
		return Closure(self._declaration, env, self._is_initializer)
	
	def call(self, interpreter, args:ARGS) -> VALUE:
		env = Environment(self._closure)
		for param, arg in zip(self._declaration.params, args):
			env.define(param.lexeme, arg)
		signal = interpreter.execute_block(self._declaration.body, env)
		# An initializer always yields its instance, however it returns.
		if self._is_initializer: return self._closure.get_at(0, "this")
		if signal is None: return None
		return signal.value

class LoxClass(Callable):
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods
	
	def __str__(self): return self.name
	
	def find_method(self, name:str) -> Optional[Closure]:
		""" Walk the method-resolution chain, nearest class first. """
		cls = self
		while cls is not None:
			if name in cls._methods: return cls._methods[name]
			cls = cls.superclass
		return None
	
	def _initializer(self) -> Optional[Closure]:
		# Only a class's own initializer counts. A class without one constructs
		# with no arguments and runs no initializer, even if a superclass has one.
		return self._methods.get(INITIALIZER_NAME)
	
	def arity(self) -> int:
		initializer = self._initializer()
		return 0 if initializer is None else initializer.arity()
	
	def call(self, interpreter, args:ARGS) -> "Instance":
		instance = Instance(self)
		initializer = self._initializer()
		if initializer is not None:
			interpreter.invoke(initializer.bind(instance), args)
		return instance

class Instance(LoxValue):
	_fields: dict[str, VALUE]
	
	def __init__(self, cls:LoxClass):
		self.cls = cls
		self._fields = {}
	
	def __str__(self): return "%s instance" % self.cls.name
	
	def get(self, name:Token) -> VALUE:
		# Fields shadow methods.
		try: return self._fields[name.lexeme]
		except KeyError: pass
		method = self.cls.find_method(name.lexeme)
		if method is not None: return method.bind(self)
		raise LoxRuntimeError(name, "Undefined property '%s'." % name.lexeme)
	
	def set(self, name:Token, value:VALUE):
		self._fields[name.lexeme] = value
