"""Utility helpers for the NCM client."""
