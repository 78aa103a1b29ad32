"""Shared helpers for the admin command-line tools."""
