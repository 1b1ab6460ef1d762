"""
Static scope resolution.

This single top-down tree-walk does a few things:

* Works out, for every local variable reference, how many scopes
  lie between the reference and the declaration it refers to.
* Complains about things that can be caught before run-time:
  duplicate locals, reading a local in its own initializer,
  misplaced return, this, and super, and a class inheriting from itself.

References that resolve to no scope at all are globals.
They get no entry in the table; the evaluator looks them up dynamically.
"""
from enum import Enum, auto
from typing import Optional, Sequence
from boozetools.support.foundation import Visitor
from .lexicon import Token, INITIALIZER_NAME
from .diagnostics import Report
from . import syntax
from .front_end import TOO_DEEP

class FunctionKind(Enum):
	NONE = auto()
	FUNCTION = auto()
	INITIALIZER = auto()
	METHOD = auto()

class ClassKind(Enum):
	NONE = auto()
	CLASS = auto()
	SUBCLASS = auto()

class Resolver(Visitor):
	"""
	The scope stack holds one dictionary per lexical scope, innermost last.
	Each maps a name to whether its definition is complete (True)
	or merely declared (False).
	
	Global scope is not on the stack: names not found are left as globals.
	"""
	depths: dict[int, int]
	_scopes: list[dict[str, bool]]
	_function: FunctionKind
	_class: ClassKind
	
	def __init__(self, report:Report):
		self._report = report
		self.depths = {}
		self._scopes = []
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE
	
	def resolve(self, statements:Sequence[syntax.Stmt]):
		for stmt in statements:
			self.visit(stmt)
	
	def reset(self):
		""" Back to top level, after abandoning a statement part-way through. """
		self._scopes.clear()
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE
	
	###########################################################################
	#  Statements
	
	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.resolve(stmt.statements)
		self._end_scope()
	
	def visit_Class(self, stmt:syntax.Class):
		enclosing_class = self._class
		self._class = ClassKind.CLASS
		
		self._declare(stmt.name)
		self._define(stmt.name)
		
		superclass = stmt.superclass
		if superclass is not None:
			if superclass.name.lexeme == stmt.name.lexeme:
				self._report.error_at(superclass.name, "A class can't inherit from itself.")
			self._class = ClassKind.SUBCLASS
			self.visit(superclass)
			self._begin_scope()
			self._scopes[-1]["super"] = True
		
		self._begin_scope()
		self._scopes[-1]["this"] = True
		for method in stmt.methods:
			if method.name.lexeme == INITIALIZER_NAME: kind = FunctionKind.INITIALIZER
			else: kind = FunctionKind.METHOD
			self._resolve_function(method, kind)
		self._end_scope()
		
		if superclass is not None: self._end_scope()
		self._class = enclosing_class
	
	def visit_Expression(self, stmt:syntax.Expression):
		self.visit(stmt.expr)
	
	def visit_Function(self, stmt:syntax.Function):
		# Define eagerly, so the function may refer to itself recursively.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionKind.FUNCTION)
	
	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None: self.visit(stmt.else_branch)
	
	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expr)
	
	def visit_Return(self, stmt:syntax.Return):
		if self._function is FunctionKind.NONE:
			self._report.error_at(stmt.keyword, "Can't return from top-level code.")
		if stmt.value is not None:
			if self._function is FunctionKind.INITIALIZER:
				self._report.error_at(stmt.keyword, "Can't return a value from an initializer.")
			self.visit(stmt.value)
	
	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None: self.visit(stmt.initializer)
		self._define(stmt.name)
	
	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)
	
	###########################################################################
	#  Expressions
	
	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)
	
	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.left)
		self.visit(expr.right)
	
	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		for arg in expr.args: self.visit(arg)
	
	def visit_Get(self, expr:syntax.Get):
		# Properties are looked up dynamically, so only the object needs resolving.
		self.visit(expr.obj)
	
	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.inner)
	
	def visit_Literal(self, expr:syntax.Literal): pass
	
	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.left)
		self.visit(expr.right)
	
	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.obj)
	
	def visit_Super(self, expr:syntax.Super):
		if self._class is ClassKind.NONE:
			self._report.error_at(expr.keyword, "Can't use 'super' outside of a class.")
		elif self._class is not ClassKind.SUBCLASS:
			self._report.error_at(expr.keyword, "Can't use 'super' in a class with no superclass.")
		self._resolve_local(expr, expr.keyword)
	
	def visit_This(self, expr:syntax.This):
		if self._class is ClassKind.NONE:
			self._report.error_at(expr.keyword, "Can't use 'this' outside of a class.")
			return
		self._resolve_local(expr, expr.keyword)
	
	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.right)
	
	def visit_Variable(self, expr:syntax.Variable):
		if self._scopes and self._scopes[-1].get(expr.name.lexeme) is False:
			self._report.error_at(expr.name, "Can't read local variable in its own initializer.")
		self._resolve_local(expr, expr.name)
	
	###########################################################################
	#  Scope management
	
	def _resolve_function(self, function:syntax.Function, kind:FunctionKind):
		enclosing_function = self._function
		self._function = kind
		self._begin_scope()
		for param in function.params:
			self._declare(param)
			self._define(param)
		# The body shares the parameters' scope; the evaluator does the same.
		self.resolve(function.body)
		self._end_scope()
		self._function = enclosing_function
	
	def _begin_scope(self):
		self._scopes.append({})
	
	def _end_scope(self):
		self._scopes.pop()
	
	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.lexeme in scope:
			self._report.error_at(name, "Already a variable with this name in this scope.")
		scope[name.lexeme] = False
	
	def _define(self, name:Token):
		if not self._scopes: return
		self._scopes[-1][name.lexeme] = True
	
	def _resolve_local(self, expr:syntax.Expr, name:Token):
		for hops, scope in enumerate(reversed(self._scopes)):
			if name.lexeme in scope:
				self.depths[expr.serial] = hops
				return

def resolve_program(statements:Sequence[syntax.Stmt], report:Report) -> dict[int, int]:
	""" Returns the table of scope-distances, keyed by expression serial number. """
	resolver = Resolver(report)
	for stmt in statements:
		try: resolver.visit(stmt)
		except RecursionError:
			report.error_at(stmt.start, TOO_DEEP)
			resolver.reset()
	return resolver.depths
