"""
Recursive-descent parser: tokens in, list of statements out.

On a syntax error, the parser reports it and then discards tokens
until it reaches something that looks like a statement boundary.
From there it carries on, so that a single pass can surface
several independent mistakes.
"""
from typing import Optional
from .lexicon import TokenType as T, Token, STATEMENT_KEYWORDS
from .diagnostics import Report
from .scanner import scan
from . import syntax

MAX_ARGUMENTS = 255
TOO_DEEP = "Too much nesting."

class ParseError(Exception):
	""" Unwinds the parser to the nearest declaration, where it resynchronizes. """
	pass

class Parser:
	_current: int
	
	def __init__(self, tokens:list[Token], report:Report):
		assert tokens and tokens[-1].is_end()
		self._tokens = tokens
		self._report = report
		self._current = 0
	
	def parse(self) -> list[syntax.Stmt]:
		statements = []
		try:
			while not self._at_end():
				stmt = self._declaration()
				if stmt is not None: statements.append(stmt)
		except RecursionError:
			# Nowhere sensible to resume from.
			self._error(self._peek(), TOO_DEEP)
		return statements
	
	###########################################################################
	#  Declarations and statements
	
	def _declaration(self) -> Optional[syntax.Stmt]:
		start = self._peek()
		try:
			if self._match(T.CLASS): stmt = self._class_declaration()
			elif self._match(T.FUN): stmt = self._function("function")
			elif self._match(T.VAR): stmt = self._var_declaration()
			else: stmt = self._statement()
		except ParseError:
			self._synchronize()
			return None
		stmt.start = start
		return stmt
	
	def _class_declaration(self) -> syntax.Class:
		name = self._consume(T.IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match(T.LESS):
			self._consume(T.IDENTIFIER, "Expect superclass name.")
			superclass = syntax.Variable(self._previous())
		self._consume(T.LEFT_BRACE, "Expect '{' before class body.")
		methods = []
		while not self._check(T.RIGHT_BRACE) and not self._at_end():
			methods.append(self._function("method"))
		self._consume(T.RIGHT_BRACE, "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)
	
	def _function(self, kind:str) -> syntax.Function:
		name = self._consume(T.IDENTIFIER, "Expect %s name." % kind)
		self._consume(T.LEFT_PAREN, "Expect '(' after %s name." % kind)
		params = []
		if not self._check(T.RIGHT_PAREN):
			while True:
				if len(params) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGUMENTS)
				params.append(self._consume(T.IDENTIFIER, "Expect parameter name."))
				if not self._match(T.COMMA): break
		self._consume(T.RIGHT_PAREN, "Expect ')' after parameters.")
		self._consume(T.LEFT_BRACE, "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())
	
	def _var_declaration(self) -> syntax.Var:
		name = self._consume(T.IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match(T.EQUAL) else None
		self._consume(T.SEMICOLON, "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)
	
	def _statement(self) -> syntax.Stmt:
		if self._match(T.FOR): return self._for_statement()
		if self._match(T.IF): return self._if_statement()
		if self._match(T.PRINT): return self._print_statement()
		if self._match(T.RETURN): return self._return_statement()
		if self._match(T.WHILE): return self._while_statement()
		if self._match(T.LEFT_BRACE): return syntax.Block(self._block())
		return self._expression_statement()
	
	def _for_statement(self) -> syntax.Stmt:
		"""
		There is no for-loop node. The loop becomes a while-loop
		with the increment tacked onto the end of the body,
		all wrapped in a block holding the initializer.
		"""
		self._consume(T.LEFT_PAREN, "Expect '(' after 'for'.")
		if self._match(T.SEMICOLON): initializer = None
		elif self._match(T.VAR): initializer = self._var_declaration()
		else: initializer = self._expression_statement()
		
		condition = None if self._check(T.SEMICOLON) else self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after loop condition.")
		
		increment = None if self._check(T.RIGHT_PAREN) else self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")
		
		body = self._statement()
		if increment is not None:
			body = syntax.Block([body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True)
		body = syntax.While(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body
	
	def _if_statement(self) -> syntax.If:
		self._consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match(T.ELSE) else None
		return syntax.If(condition, then_branch, else_branch)
	
	def _print_statement(self) -> syntax.Print:
		value = self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after value.")
		return syntax.Print(value)
	
	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(T.SEMICOLON) else self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after return value.")
		return syntax.Return(keyword, value)
	
	def _while_statement(self) -> syntax.While:
		self._consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after condition.")
		return syntax.While(condition, self._statement())
	
	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after expression.")
		return syntax.Expression(expr)
	
	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check(T.RIGHT_BRACE) and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume(T.RIGHT_BRACE, "Expect '}' after block.")
		return statements
	
	###########################################################################
	#  Expressions, from lowest precedence to highest
	
	def _expression(self) -> syntax.Expr:
		return self._assignment()
	
	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match(T.EQUAL):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.obj, expr.name, value)
			# No need to unwind: the parser is not confused about where it is.
			self._error(equals, "Invalid assignment target.")
		return expr
	
	def _or(self) -> syntax.Expr:
		expr = self._and()
		while self._match(T.OR):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._and())
		return expr
	
	def _and(self) -> syntax.Expr:
		expr = self._equality()
		while self._match(T.AND):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._equality())
		return expr
	
	def _binary_level(self, operand, *glyphs:T) -> syntax.Expr:
		expr = operand()
		while self._match(*glyphs):
			op = self._previous()
			expr = syntax.Binary(expr, op, operand())
		return expr
	
	def _equality(self) -> syntax.Expr:
		return self._binary_level(self._comparison, T.BANG_EQUAL, T.EQUAL_EQUAL)
	
	def _comparison(self) -> syntax.Expr:
		return self._binary_level(self._term, T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)
	
	def _term(self) -> syntax.Expr:
		return self._binary_level(self._factor, T.MINUS, T.PLUS)
	
	def _factor(self) -> syntax.Expr:
		return self._binary_level(self._unary, T.SLASH, T.STAR)
	
	def _unary(self) -> syntax.Expr:
		if self._match(T.BANG, T.MINUS):
			op = self._previous()
			return syntax.Unary(op, self._unary())
		return self._call()
	
	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match(T.LEFT_PAREN):
				expr = self._finish_call(expr)
			elif self._match(T.DOT):
				name = self._consume(T.IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr
	
	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		args = []
		if not self._check(T.RIGHT_PAREN):
			while True:
				if len(args) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGUMENTS)
				args.append(self._expression())
				if not self._match(T.COMMA): break
		paren = self._consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)
	
	def _primary(self) -> syntax.Expr:
		if self._match(T.FALSE): return syntax.Literal(False)
		if self._match(T.TRUE): return syntax.Literal(True)
		if self._match(T.NIL): return syntax.Literal(None)
		if self._match(T.NUMBER, T.STRING): return syntax.Literal(self._previous().literal)
		if self._match(T.SUPER):
			keyword = self._previous()
			self._consume(T.DOT, "Expect '.' after 'super'.")
			method = self._consume(T.IDENTIFIER, "Expect superclass method name.")
			return syntax.Super(keyword, method)
		if self._match(T.THIS): return syntax.This(self._previous())
		if self._match(T.IDENTIFIER): return syntax.Variable(self._previous())
		if self._match(T.LEFT_PAREN):
			expr = self._expression()
			self._consume(T.RIGHT_PAREN, "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(self._peek(), "Expect expression.")
	
	###########################################################################
	#  Token-wrangling primitives
	
	def _match(self, *kinds:T) -> bool:
		if any(self._check(k) for k in kinds):
			self._advance()
			return True
		return False
	
	def _consume(self, kind:T, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)
	
	def _check(self, kind:T) -> bool:
		return not self._at_end() and self._peek().type is kind
	
	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()
	
	def _at_end(self) -> bool:
		return self._peek().is_end()
	
	def _peek(self) -> Token:
		return self._tokens[self._current]
	
	def _previous(self) -> Token:
		return self._tokens[self._current - 1]
	
	def _error(self, token:Token, message:str) -> ParseError:
		""" Report now; the caller decides whether to raise the result. """
		self._report.error_at(token, message)
		return ParseError(token, message)
	
	def _synchronize(self):
		""" Panic mode: skip ahead to just past a semicolon, or to a statement keyword. """
		self._advance()
		while not self._at_end():
			if self._previous().type is T.SEMICOLON: return
			if self._peek().type in STATEMENT_KEYWORDS: return
			self._advance()

def parse_tokens(tokens:list[Token], report:Report) -> list[syntax.Stmt]:
	return Parser(tokens, report).parse()

def parse_text(text:str, report:Report) -> list[syntax.Stmt]:
	""" Scan and parse in one go. Check the report before trusting the result. """
	return parse_tokens(scan(text, report), report)
