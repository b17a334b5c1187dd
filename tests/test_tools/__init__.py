"""
Test Tools Package
Tests for the tools module (frequency policy, status classifier, time utilities)
"""

__all__ = [
    "test_frequency_policy",
    "test_status_classifier",
    "test_time_utils",
]
