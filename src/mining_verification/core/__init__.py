"""Core business logic: rig clients, registry, evaluation, and response shapes.

This module is framework-agnostic. It has no dependency on FastAPI or any
server framework; the HTTP layer in ``mining_verification.server`` imports
from here.
"""
