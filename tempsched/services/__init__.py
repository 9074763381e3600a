"""Services Layer: imperative shell around the pure core.

Invariants:
    - Services own IO (database, collaborators); core owns the rules
    - Every write goes through ScheduleDataStore.apply
"""
