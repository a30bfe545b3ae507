"""Compile OpenAPI documents into Python models and handler interfaces."""
