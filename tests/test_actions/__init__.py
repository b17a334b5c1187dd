"""
Test Actions Package
Tests for the reminder and adherence engines
"""
