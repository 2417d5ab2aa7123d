"""Application composition layer for the maintenance tool.

The controller in this package wires adapters, use cases and the maintenance
view-model into runnable CLI and web workflows without placing business logic
in the entry points.
"""
