"""Outer surfaces of the resource catalog: REST API, HTTP client and CLI."""
