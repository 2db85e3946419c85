"""Model mapping layer.

This package resolves resource names, property definitions, and primary
keys from caller-declared model types, and maps objects to storage shape.
"""
