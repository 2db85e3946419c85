"""Request dispatch.

This package resolves the engine registered for a request's resource and
forwards the request to it.
"""
