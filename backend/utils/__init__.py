"""
Utilities package for Fixing Maritime backend.
"""
