"""Shared helpers for logging, password hashing and input validation."""
