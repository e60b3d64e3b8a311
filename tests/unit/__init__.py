"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- Build DeferredValues with the fixtures in ``tests.fixtures.deferreds`` and
  observe continuations with ``tests.helpers.recorders.CallRecorder``.
- Prefer behavior-centric assertions (status, outcome, call order) over
  private attributes.
- Keep tests small, fast, and deterministic.
"""
