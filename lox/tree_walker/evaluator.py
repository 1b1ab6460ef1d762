"""
The tree-walking evaluator.

Expressions evaluate to values. Statements execute to a control signal:
None when they complete normally, or a Returning when a return-statement
wants out of the enclosing function. Each statement that contains other
statements checks for that signal and passes it upward.

Run-time errors, on the other hand, are exceptions. The first one
abandons the rest of the run.
"""
import sys
import math
import operator
from typing import Optional, Sequence, TextIO
from boozetools.support.foundation import Visitor
from .. import syntax
from ..lexicon import TokenType as T, Token, INITIALIZER_NAME
from ..diagnostics import Report
from ..environment import Environment, Undefined
from .types import VALUE, ARGS, Returning, LoxRuntimeError, ArityMismatch
from .values import Callable, Closure, LoxClass, Instance, PRIMITIVES

SIGNAL = Optional[Returning]

STACK_OVERFLOW = "Stack overflow."

def _divide(a:float, b:float) -> float:
	# IEEE semantics, which Python's float division does not quite give.
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

NUMERIC_BINARY = {
	T.MINUS : operator.sub,
	T.STAR : operator.mul,
	T.SLASH : _divide,
	T.GREATER : operator.gt,
	T.GREATER_EQUAL : operator.ge,
	T.LESS : operator.lt,
	T.LESS_EQUAL : operator.le,
}

def is_truthy(value:VALUE) -> bool:
	""" nil and false are falsy; everything else is truthy, zero and "" included. """
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	if a is None: return b is None
	# Never coerce across types. (In Python, True == 1.0, which won't do.)
	if type(a) is not type(b): return False
	# Equality is identity-like: a NaN equals itself, unlike under IEEE comparison.
	if isinstance(a, float) and math.isnan(a): return math.isnan(b)
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, float):
		text = repr(value)
		if text.endswith(".0"): text = text[:-2]
		return text
	return str(value)

def _check_number_operand(op:Token, operand:VALUE):
	if not isinstance(operand, float):
		raise LoxRuntimeError(op, "Operand must be a number.")

def _check_number_operands(op:Token, left:VALUE, right:VALUE):
	if not (isinstance(left, float) and isinstance(right, float)):
		raise LoxRuntimeError(op, "Operands must be numbers.")

class Interpreter(Visitor):
	"""
	One interpreter serves a whole session. The global environment and the
	table of resolved scope-distances both carry over from one run to the next,
	because functions defined in an earlier run may well be called in a later one.
	"""
	globals: Environment
	locals: dict[int, int]
	_environment: Environment
	
	def __init__(self, report:Report, stdout:Optional[TextIO]=None):
		self._report = report
		self._stdout = stdout
		self.globals = Environment()
		self._environment = self.globals
		self.locals = {}
		for primitive in PRIMITIVES:
			self.globals.define(primitive.name, primitive)
	
	def interpret(self, statements:Sequence[syntax.Stmt], depths:dict[int, int]=None):
		if depths: self.locals.update(depths)
		for stmt in statements:
			try: self.execute(stmt)
			except LoxRuntimeError as error:
				self._report.runtime_error(error.token, error.message)
				return
			except RecursionError:
				# Too deep outside of any call, so there is no paren to blame.
				self._report.runtime_error(stmt.start, STACK_OVERFLOW)
				return
	
	def evaluate(self, expr:syntax.Expr) -> VALUE:
		return self.visit(expr)
	
	def execute(self, stmt:syntax.Stmt) -> SIGNAL:
		return self.visit(stmt)
	
	def execute_block(self, statements:Sequence[syntax.Stmt], env:Environment) -> SIGNAL:
		previous = self._environment
		try:
			self._environment = env
			for stmt in statements:
				signal = self.execute(stmt)
				if signal is not None: return signal
		finally:
			self._environment = previous
	
	def invoke(self, callee:Callable, args:ARGS) -> VALUE:
		expected = callee.arity()
		if len(args) != expected: raise ArityMismatch(expected, len(args))
		return callee.call(self, args)
	
	###########################################################################
	#  Statements
	
	def visit_Block(self, stmt:syntax.Block) -> SIGNAL:
		return self.execute_block(stmt.statements, Environment(self._environment))
	
	def visit_Class(self, stmt:syntax.Class) -> SIGNAL:
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass)
			if not isinstance(superclass, LoxClass):
				raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")
		
		# Bind the name first, so that methods may refer to their own class.
		self._environment.define(stmt.name.lexeme, None)
		
		env = self._environment
		if superclass is not None:
			env = Environment(env)
			env.define("super", superclass)
		
		methods = {
			method.name.lexeme: Closure(method, env, method.name.lexeme == INITIALIZER_NAME)
			for method in stmt.methods
		}
		cls = LoxClass(stmt.name.lexeme, superclass, methods)
		self._environment.assign(stmt.name, cls)
	
	def visit_Expression(self, stmt:syntax.Expression) -> SIGNAL:
		self.evaluate(stmt.expr)
	
	def visit_Function(self, stmt:syntax.Function) -> SIGNAL:
		self._environment.define(stmt.name.lexeme, Closure(stmt, self._environment, False))
	
	def visit_If(self, stmt:syntax.If) -> SIGNAL:
		if is_truthy(self.evaluate(stmt.condition)):
			return self.execute(stmt.then_branch)
		elif stmt.else_branch is not None:
			return self.execute(stmt.else_branch)
	
	def visit_Print(self, stmt:syntax.Print) -> SIGNAL:
		value = self.evaluate(stmt.expr)
		print(stringify(value), file=self._stdout or sys.stdout)
	
	def visit_Return(self, stmt:syntax.Return) -> SIGNAL:
		value = None if stmt.value is None else self.evaluate(stmt.value)
		return Returning(value)
	
	def visit_Var(self, stmt:syntax.Var) -> SIGNAL:
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
		self._environment.define(stmt.name.lexeme, value)
	
	def visit_While(self, stmt:syntax.While) -> SIGNAL:
		while is_truthy(self.evaluate(stmt.condition)):
			signal = self.execute(stmt.body)
			if signal is not None: return signal
	
	###########################################################################
	#  Expressions
	
	def visit_Literal(self, expr:syntax.Literal) -> VALUE:
		return expr.value
	
	def visit_Grouping(self, expr:syntax.Grouping) -> VALUE:
		return self.evaluate(expr.inner)
	
	def visit_Variable(self, expr:syntax.Variable) -> VALUE:
		return self._look_up(expr.name, expr)
	
	def visit_This(self, expr:syntax.This) -> VALUE:
		return self._look_up(expr.keyword, expr)
	
	def visit_Assign(self, expr:syntax.Assign) -> VALUE:
		value = self.evaluate(expr.value)
		hops = self.locals.get(expr.serial)
		if hops is None:
			try: self.globals.assign(expr.name, value)
			except Undefined: raise self._undefined_variable(expr.name) from None
		else:
			self._environment.assign_at(hops, expr.name, value)
		return value
	
	def visit_Unary(self, expr:syntax.Unary) -> VALUE:
		right = self.evaluate(expr.right)
		if expr.op.type is T.BANG:
			return not is_truthy(right)
		assert expr.op.type is T.MINUS, expr.op
		_check_number_operand(expr.op, right)
		return -right
	
	def visit_Binary(self, expr:syntax.Binary) -> VALUE:
		left = self.evaluate(expr.left)
		right = self.evaluate(expr.right)
		kind = expr.op.type
		if kind is T.EQUAL_EQUAL: return is_equal(left, right)
		if kind is T.BANG_EQUAL: return not is_equal(left, right)
		if kind is T.PLUS:
			if isinstance(left, float) and isinstance(right, float): return left + right
			if isinstance(left, str) and isinstance(right, str): return left + right
			raise LoxRuntimeError(expr.op, "Operands must be two numbers or two strings.")
		_check_number_operands(expr.op, left, right)
		return NUMERIC_BINARY[kind](left, right)
	
	def visit_Logical(self, expr:syntax.Logical) -> VALUE:
		left = self.evaluate(expr.left)
		if expr.op.type is T.OR:
			if is_truthy(left): return left
		elif not is_truthy(left):
			return left
		return self.evaluate(expr.right)
	
	def visit_Call(self, expr:syntax.Call) -> VALUE:
		callee = self.evaluate(expr.callee)
		args = [self.evaluate(a) for a in expr.args]
		if not isinstance(callee, Callable):
			raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
		try:
			return self.invoke(callee, args)
		except ArityMismatch as ex:
			raise LoxRuntimeError(expr.paren, str(ex)) from None
		except RecursionError:
			raise LoxRuntimeError(expr.paren, STACK_OVERFLOW) from None
	
	def visit_Get(self, expr:syntax.Get) -> VALUE:
		obj = self.evaluate(expr.obj)
		if isinstance(obj, Instance):
			return obj.get(expr.name)
		raise LoxRuntimeError(expr.name, "Only instances have properties.")
	
	def visit_Set(self, expr:syntax.Set) -> VALUE:
		obj = self.evaluate(expr.obj)
		if not isinstance(obj, Instance):
			raise LoxRuntimeError(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value)
		obj.set(expr.name, value)
		return value
	
	def visit_Super(self, expr:syntax.Super) -> VALUE:
		hops = self.locals[expr.serial]
		superclass = self._environment.get_at(hops, "super")
		# The environment binding "this" is always just inside the one binding "super".
		instance = self._environment.get_at(hops - 1, "this")
		method = superclass.find_method(expr.method.lexeme)
		if method is None:
			raise LoxRuntimeError(expr.method, "Undefined property '%s'." % expr.method.lexeme)
		return method.bind(instance)
	
	###########################################################################
	
	def _look_up(self, name:Token, expr:syntax.Expr) -> VALUE:
		hops = self.locals.get(expr.serial)
		if hops is not None:
			return self._environment.get_at(hops, name.lexeme)
		try: return self.globals.get(name)
		except Undefined: raise self._undefined_variable(name) from None
	
	@staticmethod
	def _undefined_variable(name:Token) -> LoxRuntimeError:
		return LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)
