"""API service package."""
