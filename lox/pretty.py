"""
Render syntax trees in a parenthesized prefix notation.
Handy for seeing how the parser grouped things: "-123 * (45.67)"
comes out as "(* (- 123) (group 45.67))".
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .tree_walker.evaluator import stringify

class TreePrinter(Visitor):
	
	def render(self, node) -> str:
		return self.visit(node)
	
	def _parenthesize(self, head:str, *parts) -> str:
		words = [head]
		for p in parts:
			words.append(p if isinstance(p, str) else self.visit(p))
		return "(%s)" % " ".join(words)
	
	# Expressions
	
	def visit_Literal(self, expr:syntax.Literal):
		if isinstance(expr.value, str): return '"%s"' % expr.value
		return stringify(expr.value)
	
	def visit_Variable(self, expr:syntax.Variable): return expr.name.lexeme
	def visit_This(self, expr:syntax.This): return "this"
	def visit_Super(self, expr:syntax.Super): return "(super %s)" % expr.method.lexeme
	def visit_Grouping(self, expr:syntax.Grouping): return self._parenthesize("group", expr.inner)
	def visit_Unary(self, expr:syntax.Unary): return self._parenthesize(expr.op.lexeme, expr.right)
	def visit_Binary(self, expr:syntax.Binary): return self._parenthesize(expr.op.lexeme, expr.left, expr.right)
	def visit_Logical(self, expr:syntax.Logical): return self._parenthesize(expr.op.lexeme, expr.left, expr.right)
	def visit_Assign(self, expr:syntax.Assign): return self._parenthesize("=", expr.name.lexeme, expr.value)
	def visit_Call(self, expr:syntax.Call): return self._parenthesize("call", expr.callee, *expr.args)
	def visit_Get(self, expr:syntax.Get): return self._parenthesize(".", expr.obj, expr.name.lexeme)
	def visit_Set(self, expr:syntax.Set): return self._parenthesize("=", expr.obj, expr.name.lexeme, expr.value)
	
	# Statements
	
	def visit_Expression(self, stmt:syntax.Expression): return self._parenthesize(";", stmt.expr)
	def visit_Print(self, stmt:syntax.Print): return self._parenthesize("print", stmt.expr)
	def visit_Block(self, stmt:syntax.Block): return self._parenthesize("block", *stmt.statements)
	def visit_While(self, stmt:syntax.While): return self._parenthesize("while", stmt.condition, stmt.body)
	
	def visit_Var(self, stmt:syntax.Var):
		if stmt.initializer is None: return self._parenthesize("var", stmt.name.lexeme)
		return self._parenthesize("var", stmt.name.lexeme, "=", stmt.initializer)
	
	def visit_If(self, stmt:syntax.If):
		if stmt.else_branch is None:
			return self._parenthesize("if", stmt.condition, stmt.then_branch)
		return self._parenthesize("if-else", stmt.condition, stmt.then_branch, stmt.else_branch)
	
	def visit_Return(self, stmt:syntax.Return):
		if stmt.value is None: return "(return)"
		return self._parenthesize("return", stmt.value)
	
	def visit_Function(self, stmt:syntax.Function):
		params = "(%s)" % " ".join(p.lexeme for p in stmt.params)
		return self._parenthesize("fun", stmt.name.lexeme, params, *stmt.body)
	
	def visit_Class(self, stmt:syntax.Class):
		head = [stmt.name.lexeme]
		if stmt.superclass is not None:
			head.extend(["<", stmt.superclass.name.lexeme])
		return self._parenthesize("class", *head, *stmt.methods)

def render(node) -> str:
	return TreePrinter().render(node)
