"""Kernel – errors, option type and clock shared by every layer."""
