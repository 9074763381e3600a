"""Temporary Schedules Package: interval-aware document store for schedule overrides.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
