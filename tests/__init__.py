"""Test suite for the leadform intake engine.

This package contains tests for:
- Validation rules (letters-only, digits-only, email shape)
- Single-select chip groups and session lifecycle
- Event system (emission, ordering, failure isolation)
- FormStateEngine mutations and read access
- Integration scenarios (chip clicks, typing, budget slider, submit)
"""
