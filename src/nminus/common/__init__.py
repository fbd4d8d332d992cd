"""Shared helpers: logging, HTTP and retry."""
