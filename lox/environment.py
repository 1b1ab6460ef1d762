"""
The run-time counterpart of lexical scope: the canonical list-structured search.

Each environment owns its bindings and links to the one enclosing it.
That link is fixed at construction, so the chain can never form a cycle.
Closures keep environments alive by referring to them.
"""
from typing import Any, Optional
from .lexicon import Token

class Undefined(KeyError):
	""" Raised with the offending name token; the evaluator turns it into a run-time error. """
	def __init__(self, name:Token):
		super().__init__(name)
		self.name = name

class Environment:
	_bindings: dict[str, Any]
	enclosing: Optional["Environment"]
	
	def __init__(self, enclosing:Optional["Environment"]=None):
		self._bindings = {}
		self.enclosing = enclosing
	
	def __repr__(self):
		return "<Environment %s>" % ", ".join(self._bindings)
	
	def define(self, name:str, value:Any):
		""" Unconditionally creates or overwrites, right here. """
		self._bindings[name] = value
	
	def get(self, name:Token) -> Any:
		env = self
		while env is not None:
			try: return env._bindings[name.lexeme]
			except KeyError: env = env.enclosing
		raise Undefined(name)
	
	def assign(self, name:Token, value:Any):
		""" There is no implicit creation of globals: the name must already exist somewhere. """
		env = self
		while env is not None:
			if name.lexeme in env._bindings:
				env._bindings[name.lexeme] = value
				return
			env = env.enclosing
		raise Undefined(name)
	
	def ancestor(self, hops:int) -> "Environment":
		env = self
		for _ in range(hops): env = env.enclosing
		return env
	
	# The resolver has already proven these bindings exist:
	def get_at(self, hops:int, name:str) -> Any:
		return self.ancestor(hops)._bindings[name]
	
	def assign_at(self, hops:int, name:Token, value:Any):
		self.ancestor(hops)._bindings[name.lexeme] = value
