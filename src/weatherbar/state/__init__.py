"""Shared state layer.

Everything the polling loops share lives here: the guarded state cells,
and the single-slot channels the loops use to notify each other.
"""
