"""HTTP surface of both services."""
