"""
Hookline Test Suite

This package contains all test modules organized by test type:
- unit/ - Tests for individual components (hook bus, cipher, scheduler, sessions, stores)
- integration/ - API and end-to-end session scenarios
- fixtures/ - Shared test helpers
"""
