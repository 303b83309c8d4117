"""
Kernel layer.

Deterministic, integer-only math used by the pool core. `kernels/python/`
holds the production Python kernels.
"""
