"""
Stack Array Structural Invariants

Verification helpers for the guarantees every stack array must keep no matter
which sequence of operations produced it.
"""
