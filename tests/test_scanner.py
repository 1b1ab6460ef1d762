import io
import unittest

from lox.diagnostics import Report
from lox.lexicon import TokenType as T
from lox.scanner import scan

def _scan(text):
	report = Report(stderr=io.StringIO())
	return scan(text, report), report

def _kinds(tokens):
	return [t.type for t in tokens]

class ScannerTests(unittest.TestCase):
	
	def test_punctuation(self):
		tokens, report = _scan("(){},.-+;*/ ! != = == < <= > >=")
		assert report.ok()
		self.assertEqual([
			T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE,
			T.COMMA, T.DOT, T.MINUS, T.PLUS, T.SEMICOLON, T.STAR, T.SLASH,
			T.BANG, T.BANG_EQUAL, T.EQUAL, T.EQUAL_EQUAL,
			T.LESS, T.LESS_EQUAL, T.GREATER, T.GREATER_EQUAL, T.EOF,
		], _kinds(tokens))
	
	def test_keywords_beat_identifiers(self):
		tokens, _ = _scan("or orchid class _class classy this")
		self.assertEqual([T.OR, T.IDENTIFIER, T.CLASS, T.IDENTIFIER, T.IDENTIFIER, T.THIS, T.EOF], _kinds(tokens))
		self.assertEqual("orchid", tokens[1].lexeme)
	
	def test_numbers(self):
		tokens, _ = _scan("123 4.5 .5 6.")
		self.assertEqual([T.NUMBER, T.NUMBER, T.DOT, T.NUMBER, T.NUMBER, T.DOT, T.EOF], _kinds(tokens))
		self.assertEqual(123.0, tokens[0].literal)
		self.assertEqual(4.5, tokens[1].literal)
		self.assertEqual(5.0, tokens[3].literal)
		self.assertEqual("6", tokens[4].lexeme)
	
	def test_string_spans_lines(self):
		tokens, report = _scan('"one\ntwo" x')
		assert report.ok()
		self.assertEqual("one\ntwo", tokens[0].literal)
		self.assertEqual('"one\ntwo"', tokens[0].lexeme)
		self.assertEqual(2, tokens[1].line)
	
	def test_comments_and_whitespace_vanish(self):
		tokens, _ = _scan("// nothing here\n\t\r  a // trailing\nb")
		self.assertEqual([T.IDENTIFIER, T.IDENTIFIER, T.EOF], _kinds(tokens))
		self.assertEqual([2, 3, 3], [t.line for t in tokens])
	
	def test_offsets_point_at_lexemes(self):
		text = "var answer = 42;"
		tokens, _ = _scan(text)
		for t in tokens[:-1]:
			self.assertEqual(t.lexeme, text[t.offset:t.offset+len(t.lexeme)])
	
	def test_exactly_one_end_token(self):
		for text in ["", "   ", "a", '"unterminated', "@"]:
			with self.subTest(text):
				tokens, _ = _scan(text)
				self.assertEqual(1, sum(t.is_end() for t in tokens))
				assert tokens[-1].is_end()
	
	def test_errors_do_not_stop_the_scan(self):
		tokens, report = _scan("1 @\n# 2")
		assert report.sick()
		self.assertEqual([
			"[line 1] Error: Unexpected character.",
			"[line 2] Error: Unexpected character.",
		], report.issues)
		self.assertEqual([T.NUMBER, T.NUMBER, T.EOF], _kinds(tokens))
	
	def test_stray_characters_of_every_sort(self):
		tokens, report = _scan("a\vb\fc é ~")
		self.assertEqual(4, len(report.issues))
		assert all(issue == "[line 1] Error: Unexpected character." for issue in report.issues)
		self.assertEqual(["a", "b", "c", ""], [t.lexeme for t in tokens])
	
	def test_multi_line_string_lands_on_its_last_line(self):
		tokens, _ = _scan('\n"one\ntwo\nthree";')
		self.assertEqual([4, 4, 4], [t.line for t in tokens])
		self.assertEqual(1, tokens[0].offset)
	
	def test_slash_and_comment(self):
		tokens, _ = _scan("a / b // c / d\ne")
		self.assertEqual([T.IDENTIFIER, T.SLASH, T.IDENTIFIER, T.IDENTIFIER, T.EOF], _kinds(tokens))
	
	def test_unterminated_string_reports_last_line(self):
		tokens, report = _scan('print "abc\n\ndef')
		self.assertEqual(["[line 3] Error: Unterminated string."], report.issues)
		self.assertEqual([T.PRINT, T.EOF], _kinds(tokens))


if __name__ == '__main__':
	unittest.main()
