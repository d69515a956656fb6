"""Tool callables exposed to agents."""
