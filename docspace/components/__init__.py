"""Core Business Components.

This package contains independent business modules:
- namespace: folder/file tree engine, store adapters and search view
"""
