"""
Tests for the live intel package.
"""
