"""Shared test fixtures and store doubles."""
