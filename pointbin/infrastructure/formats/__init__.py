"""File format implementations."""
