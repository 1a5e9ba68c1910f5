"""Test suite for the loco-bdd package.

This package contains unit and integration tests validating expression
bindings, tag resolution, step matching and dispatch, reporting, and
called unit orchestration.
"""
