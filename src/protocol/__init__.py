"""Request protocol.

This package holds the six request builders engines consume. Builders
validate arguments eagerly and serialize to a transport-ready payload.
"""
