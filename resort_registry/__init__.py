"""
Resort Registry - employee and rehabilitation resort records

A pair of document collections (employees, resorts) kept consistent by
hand-written model classes: field validation, foreign-key checks against
the remote store, a derived therapy set recomputed from therapist
references, and batched multi-document writes on cascading mutations.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
