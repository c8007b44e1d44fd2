"""
fnbuild Tests
=============

Unit and integration tests for the fnbuild package.

Structure:
- unit/ - Unit tests for individual components
- integration/ - End-to-end builds with a stand-in compiler
"""
