"""Unit tests for the algorand package."""
