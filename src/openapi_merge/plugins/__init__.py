"""Plugin packages discovered at runtime."""
