"""Packaged data files (formula manifest)."""
