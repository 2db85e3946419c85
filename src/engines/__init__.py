"""Storage engines.

This package defines the engine contract and the in-memory reference
engine that executes protocol requests.
"""
