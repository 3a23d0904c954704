"""
Core business logic for coaching.

This module is framework-agnostic - it doesn't import FastAPI, Firestore,
or any infrastructure concerns. Persistence reaches the controller through
repository protocols, so programs, sessions and screens can be tested in
isolation.
"""
