"""
A tree-walking interpreter for Lox: closures, lexical scope, and classes with single inheritance.
"""
