"""Domain layer — option container, property expressions, error taxonomy.

This layer depends only on stdlib.
It must never import from engine, optional, or config.
"""
