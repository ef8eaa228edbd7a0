"""
Pledge core: settlement state machine and deferred-callback scheduling.
"""
