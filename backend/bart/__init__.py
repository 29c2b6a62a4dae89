"""BART Application Package — Balloon Analogue Risk Task engine and API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
