"""
Application layer - consistency services over the document store.

Services orchestrate the domain validators and the document store port:
referential checks, derived attribute propagation, mutators and the
cursor page reader.
"""
