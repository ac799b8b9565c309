"""Engine layer — rules, validators, builders, and results.

Engine modules may import from domain and config.
They must never import from optional at module level; the builder's
Option methods import it lazily.
"""
