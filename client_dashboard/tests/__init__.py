"""Test suite for the client dashboard backend."""
