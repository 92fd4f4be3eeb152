from __future__ import annotations

"""
Pure tree algorithms: lookup, structural edits, naming and move planning.
"""
