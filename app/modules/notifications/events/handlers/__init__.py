"""Event handlers, one module per producing domain."""
