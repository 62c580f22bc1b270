"""Services Layer — orchestration of the store around the pure trust core.

Invariants:
    - Services await the TrustStore and call core functions in between
    - Each mutating operation commits exactly once

Design Decisions:
    - One service per concern (graph, trust, retraction, diagnostics)
    - SqlTrustStore is the only module here that knows about ORM models
"""
