"""
Test suite for the prode standings backend.
"""
