"""
Lox: a small dynamically-typed scripting language with C-like syntax,
run by a tree-walking interpreter.

The pipeline goes scanner -> front_end -> resolution -> tree_walker,
and the executive module strings those passes together.
"""
