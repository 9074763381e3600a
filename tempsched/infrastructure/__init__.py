"""Infrastructure Layer: database access, logging and SQL-backed collaborators.

Invariants:
    - Infrastructure never imports from core/ domain logic except the error
      hierarchy it maps into
    - All database calls wrapped with rollback and error mapping
"""
