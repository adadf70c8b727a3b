"""Verifications: the check table, its execution units, and the checks."""
