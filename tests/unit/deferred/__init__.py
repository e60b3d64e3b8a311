"""Unit tests for vow.deferred."""
