"""
Plain data structures: credentials, resource references, raw bodies.

All of them are purely data-manipulative and computational:
no I/O and no network calls are made here.
"""
