"""Event store domain layer.

Value objects for recorded events, the enumerations they use, the filter
criteria for querying them, and the module's error types.
"""
