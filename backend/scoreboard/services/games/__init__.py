"""Game domain services: the dual clock, score/foul adjustments and clock workers.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""
