"""
Verifier lookup core: cached, deduplicated resolution of level verification records.
"""
__version__ = "0.1.0"
