"""Use-case layer for maintenance actions.

Each module coordinates domain objects and collaborator ports without
touching view state, preserving MVVM + Hexagonal boundaries.
"""
