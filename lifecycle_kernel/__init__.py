"""
Lifecycle Kernel

A guarded finite-state-machine substrate:
- Data-driven transition tables per entity kind
- Ordered, short-circuiting guard chains that veto transitions
- Per-entity compare-and-set commits
- Structured, machine-readable rejection results
"""

__version__ = "0.1.0"
