"""Time-bucketing and range-computation engine.

Pure functions only: no I/O, no clock reads. The HTTP layer in ``app``
supplies "now" and the timezone explicitly.
"""
