"""Construct state machines.

Each module implements one grammar rule as a set of state functions whose
entry point is ``start``. Modules prefixed with ``partial_`` are fragments
(labels, destinations, titles, whitespace, data) reused by several
constructs. Which construct is tried on which byte is decided by the
content types in ``huellas.content``.
"""
