"""File storage helpers for uploaded images."""
