"""Built-in step definitions registered by every step registry."""
