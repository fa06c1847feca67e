"""Composition services: registry, pool, assignment, ordering, compilation and storage."""
