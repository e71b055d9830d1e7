"""Logging setup and console output helpers."""
