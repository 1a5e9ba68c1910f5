"""Scenario execution engine for a behavior-driven test DSL.

The `loco_bdd` package runs already-parsed features and scenarios:

- textual steps are matched to registered step handlers;
- embedded expressions are evaluated against a per-scenario variable store;
- called features and scenarios are orchestrated with fail-fast semantics
  and errors carrying feature, scenario, and line provenance.

Parsing of the concrete DSL grammar and report rendering are left to
external collaborators.
"""
