"""
Coachboard - a coaching application for managing student training programs.

This package contains the complete application:
- core: Framework-agnostic program, session and navigation logic
- infrastructure: Firestore persistence and identity
- i18n: UI translation tables
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
