"""
Tests for connections app.
"""
