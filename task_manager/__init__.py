"""Task management API with token authentication."""
