"""Shared logging, console output and settings helpers."""
