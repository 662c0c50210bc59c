"""Utility helpers shared across the toolkit."""
