"""Core Layer — pure game logic, no IO, no async, no web framework.

Invariants:
    - No module in core/ imports from api/, schemas/, or infrastructure/
    - Randomness only enters through an injected ThresholdSource

Design Decisions:
    - Functional core separated from imperative shell
"""
