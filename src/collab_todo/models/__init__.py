"""Pydantic models for users, projects, todos and API envelopes."""
