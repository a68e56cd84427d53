"""Cross-cutting managers: logging, JWT tokens and permission rules."""
