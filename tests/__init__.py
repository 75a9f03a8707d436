"""Tests for gitrelease."""
