"""
Data operations package for well-log curves.

Provides the in-memory sample store, per-curve axis range cache,
interpretation payload parsing, and the well service client.
"""
