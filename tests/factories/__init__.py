"""Test data factories for raw Reddit payloads."""
