"""Domain layer: the relatedness graph, its traversal, and its errors.

Nothing in this package performs I/O.
"""
