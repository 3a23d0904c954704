"""
Infrastructure layer - external service integrations.

- firestore: Firebase sign-in, document persistence and demo data seeding

These wrappers translate between external formats and our domain models.
"""
