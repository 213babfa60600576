"""Services Layer — async orchestration of marketplace operations.

Invariants:
    - Every service takes an AsyncSession and never opens its own engine
    - Eligibility decisions delegated to core/ pure checks

Design Decisions:
    - One service class per aggregate (gigs, applications, reviews, accounts)
"""
