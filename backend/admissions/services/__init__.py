"""Services Layer — review queue, ranking, admission transitions, and Slack archival.

Invariants:
    - Services depend on core/ rules and repository Protocols, never on FastAPI
    - SQL implementations of the Protocols live in sql_repositories.py
"""
