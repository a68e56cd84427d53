"""HTTP routers; each maps one group of endpoints onto a service."""
