"""HireScreen REST service."""
