"""
The most-fundamental lexical vocabulary of the language.
These are kept apart from the scanner so that the parser,
the resolver, and the run-time can all share them freely.
"""
from enum import Enum, auto
from typing import NamedTuple, Any

class TokenType(Enum):
	# Single-character punctuation.
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()
	COMMA = auto()
	DOT = auto()
	MINUS = auto()
	PLUS = auto()
	SEMICOLON = auto()
	SLASH = auto()
	STAR = auto()
	
	# One or two character punctuation.
	BANG = auto()
	BANG_EQUAL = auto()
	EQUAL = auto()
	EQUAL_EQUAL = auto()
	GREATER = auto()
	GREATER_EQUAL = auto()
	LESS = auto()
	LESS_EQUAL = auto()
	
	# Literals.
	IDENTIFIER = auto()
	STRING = auto()
	NUMBER = auto()
	
	# Keywords.
	AND = auto()
	CLASS = auto()
	ELSE = auto()
	FALSE = auto()
	FOR = auto()
	FUN = auto()
	IF = auto()
	NIL = auto()
	OR = auto()
	PRINT = auto()
	RETURN = auto()
	SUPER = auto()
	THIS = auto()
	TRUE = auto()
	VAR = auto()
	WHILE = auto()
	
	EOF = auto()

KEYWORDS = {
	word: TokenType[word.upper()]
	for word in (
		"and", "class", "else", "false", "for", "fun", "if", "nil",
		"or", "print", "return", "super", "this", "true", "var", "while",
	)
}

# Whatever may begin a fresh statement; the parser resynchronizes on these.
STATEMENT_KEYWORDS = frozenset([
	TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
	TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
])

# The one method name with special meaning: the constructor.
INITIALIZER_NAME = "init"

class Token(NamedTuple):
	""" Produced once by the scanner, then only ever referred to. """
	type: TokenType
	lexeme: str
	literal: Any
	line: int
	offset: int = 0  # Where the lexeme starts in the source text; used for illustrations.
	
	def __str__(self):
		return "%s %s %s" % (self.type.name, self.lexeme, self.literal)
	
	def is_end(self) -> bool:
		return self.type is TokenType.EOF

