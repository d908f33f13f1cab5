"""
ClaimIQ Insurance Claim Analysis System

Turns free-text insurance claim queries and policy documents into structured
approval or rejection decisions backed by retrieved policy clauses.
"""

__version__ = "1.0.0"
__author__ = "ClaimIQ Team"
