"""
Allows:

    py -m lox program.lox

For details, see lox.cmdline.
"""
from .cmdline import main

main()
