"""
The set of parse-nodes in simple form.
The parser calls these constructors top-down as it recognizes each phrase.

Every expression node gets a serial number at construction.
The resolver keys its table of scope-distances by that serial,
so two structurally identical expressions in different places
never get confused with one another.
"""
from itertools import count
from typing import Optional, Any, Sequence
from .lexicon import Token

_serial = count(1)

class Expr:
	""" Root of the expression family """
	serial: int
	def __init__(self): self.serial = next(_serial)

class Stmt:
	""" Root of the statement family. The parser notes where each declaration starts. """
	start: Optional[Token] = None

###############################################################################
#
#  Expressions
#

class Literal(Expr):
	def __init__(self, value:Any):
		super().__init__()
		self.value = value
	def __repr__(self): return "<Literal %r>" % (self.value,)

class Variable(Expr):
	def __init__(self, name:Token):
		super().__init__()
		self.name = name
	def __repr__(self): return "<Variable %s>" % self.name.lexeme

class Assign(Expr):
	def __init__(self, name:Token, value:Expr):
		super().__init__()
		self.name, self.value = name, value

class Unary(Expr):
	def __init__(self, op:Token, right:Expr):
		super().__init__()
		self.op, self.right = op, right

class Binary(Expr):
	def __init__(self, left:Expr, op:Token, right:Expr):
		super().__init__()
		self.left, self.op, self.right = left, op, right

class Logical(Expr):
	""" Short-circuit "and" / "or" """
	def __init__(self, left:Expr, op:Token, right:Expr):
		super().__init__()
		self.left, self.op, self.right = left, op, right

class Grouping(Expr):
	def __init__(self, inner:Expr):
		super().__init__()
		self.inner = inner

class Call(Expr):
	paren: Token  # The closing parenthesis, for reporting run-time errors.
	def __init__(self, callee:Expr, paren:Token, args:Sequence[Expr]):
		super().__init__()
		self.callee, self.paren, self.args = callee, paren, tuple(args)

class Get(Expr):
	def __init__(self, obj:Expr, name:Token):
		super().__init__()
		self.obj, self.name = obj, name

class Set(Expr):
	def __init__(self, obj:Expr, name:Token, value:Expr):
		super().__init__()
		self.obj, self.name, self.value = obj, name, value

class This(Expr):
	def __init__(self, keyword:Token):
		super().__init__()
		self.keyword = keyword

class Super(Expr):
	def __init__(self, keyword:Token, method:Token):
		super().__init__()
		self.keyword, self.method = keyword, method

###############################################################################
#
#  Statements
#

class Expression(Stmt):
	def __init__(self, expr:Expr): self.expr = expr

class Print(Stmt):
	def __init__(self, expr:Expr): self.expr = expr

class Var(Stmt):
	def __init__(self, name:Token, initializer:Optional[Expr]):
		self.name, self.initializer = name, initializer

class Block(Stmt):
	def __init__(self, statements:Sequence[Stmt]): self.statements = tuple(statements)

class If(Stmt):
	def __init__(self, condition:Expr, then_branch:Stmt, else_branch:Optional[Stmt]):
		self.condition, self.then_branch, self.else_branch = condition, then_branch, else_branch

class While(Stmt):
	def __init__(self, condition:Expr, body:Stmt):
		self.condition, self.body = condition, body

class Function(Stmt):
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Stmt]):
		self.name, self.params, self.body = name, tuple(params), tuple(body)
	def __repr__(self): return "<Function %s/%d>" % (self.name.lexeme, len(self.params))

class Return(Stmt):
	def __init__(self, keyword:Token, value:Optional[Expr]):
		self.keyword, self.value = keyword, value

class Class(Stmt):
	def __init__(self, name:Token, superclass:Optional[Variable], methods:Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, tuple(methods)
	def __repr__(self): return "<Class %s>" % self.name.lexeme
