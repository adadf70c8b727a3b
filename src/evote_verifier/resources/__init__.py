"""Packaged data files (verification metadata manifest)."""
