"""
Persistence adapters.

These modules encapsulate how expenses are stored/retrieved (today a single
JSON file). Services depend on the adapter's load/save instead of touching
the file directly.
"""
