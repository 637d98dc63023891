"""Utility packages for graphguard."""
