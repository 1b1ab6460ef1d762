"""
Source text in, list of tokens out.

The lexical rules are a boozetools miniscan definition. Rule actions
emit (kind, semantic) pairs; `scan` turns those into proper tokens with
line numbers, or into complaints on the report. Malformed lexemes do not
stop the scan, so one pass can complain about several independent problems.
"""
from boozetools.scanning.miniscan import Definition
from boozetools.scanning.engine import IterableScanner
from .lexicon import TokenType, Token, KEYWORDS
from .diagnostics import Report

PUNCTUATION = {
	"(": TokenType.LEFT_PAREN,
	")": TokenType.RIGHT_PAREN,
	"{": TokenType.LEFT_BRACE,
	"}": TokenType.RIGHT_BRACE,
	",": TokenType.COMMA,
	".": TokenType.DOT,
	"-": TokenType.MINUS,
	"+": TokenType.PLUS,
	";": TokenType.SEMICOLON,
	"*": TokenType.STAR,
	"/": TokenType.SLASH,
	"!": TokenType.BANG,
	"!=": TokenType.BANG_EQUAL,
	"=": TokenType.EQUAL,
	"==": TokenType.EQUAL_EQUAL,
	"<": TokenType.LESS,
	"<=": TokenType.LESS_EQUAL,
	">": TokenType.GREATER,
	">=": TokenType.GREATER_EQUAL,
}

# Kind of the pseudo-token a rule emits to complain.
TROUBLE = "trouble"

def scan_punctuation(yy: IterableScanner): yy.token(PUNCTUATION[yy.match()])

def scan_number(yy: IterableScanner): yy.token(TokenType.NUMBER, float(yy.match()))

def scan_string(yy: IterableScanner): yy.token(TokenType.STRING, yy.match()[1:-1])

def scan_word(yy: IterableScanner): yy.token(KEYWORDS.get(yy.match(), TokenType.IDENTIFIER))

def scan_unterminated(yy: IterableScanner): yy.token(TROUBLE, "Unterminated string.")

def scan_stray(yy: IterableScanner): yy.token(TROUBLE, "Unexpected character.")

# Longest match wins; among equal lengths, the earlier rule.
LEX = Definition("Lox")
LEX.ignore(r"[\x20\t\r\n]+")
LEX.ignore(r"\/\/[^\n]*")
LEX.on(r"[(){},.;+*/!=<>\-]")(scan_punctuation)
LEX.on(r"[!=<>]=")(scan_punctuation)
LEX.on(r"\d+(\.\d+)?")(scan_number)
LEX.on(r'"[^"]*"')(scan_string)
LEX.on(r'"[^"]*')(scan_unterminated)
LEX.on(r"[\l_]\w*")(scan_word)
LEX.on(r".|[\v\f]")(scan_stray)

class _LineCounter:
	""" Line numbers for ascending offsets, counting only as far as needed. """
	def __init__(self, text:str):
		self._text = text
		self._seen = 0
		self._line = 1

	def at(self, offset:int) -> int:
		self._line += self._text.count("\n", self._seen, offset)
		self._seen = offset
		return self._line

def scan(text:str, report:Report) -> list[Token]:
	"""
	Always ends with exactly one EOF token, whatever else may go wrong.
	A token's line is the line where it ends, which matters only for strings
	that span lines. Likewise an unterminated string complains at the end of the text.
	"""
	tokens = []
	lines = _LineCounter(text)
	yy = LEX.scan(text)
	for kind, semantic in yy:
		line = lines.at(yy.right)
		if kind == TROUBLE:
			report.lexical_error(line, yy.left, semantic)
		else:
			tokens.append(Token(kind, yy.match(), semantic, line, yy.left))
	tokens.append(Token(TokenType.EOF, "", None, lines.at(len(text)), len(text)))
	return tokens
