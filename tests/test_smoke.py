"""
Run every program in the zoo of things that ought to work.
Each one says what it should print with comments of the form:

    print 1 + 2; // expect: 3
"""
import io
import re
from pathlib import Path
import unittest

from lox.diagnostics import Report
from lox.executive import Session

zoo_ok = Path(__file__).parent/"zoo/ok"

EXPECTATION = re.compile(r"// expect: (.*)$", re.MULTILINE)

class ExampleSmokeTests(unittest.TestCase):
	""" Run all the examples; Test for no smoke. """
	
	def test_zoo_ok(self):
		specimens = sorted(zoo_ok.glob("*.lox"))
		assert specimens
		for path in specimens:
			with self.subTest(path.name):
				text = path.read_text(encoding="utf-8")
				out = io.StringIO()
				report = Report(stderr=io.StringIO())
				session = Session(report, out)
				session.run(text)
				self.assertEqual([], report.issues)
				self.assertEqual(EXPECTATION.findall(text), out.getvalue().splitlines())
				self.assertEqual(0, session.exit_code())


if __name__ == '__main__':
	unittest.main()
