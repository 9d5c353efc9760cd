"""Shared helpers: logging setup and small utilities. No business logic."""
