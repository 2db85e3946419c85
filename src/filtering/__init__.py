"""Filter expression engine.

This package holds the predicate tree, its builder, and the expression
text parser shared by requests and engines.
"""
