"""Cohort Admissions — reviewer ratings, ranking, and the admission offer lifecycle.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
