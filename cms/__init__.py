"""Content record save service."""
