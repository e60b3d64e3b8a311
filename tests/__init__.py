"""vow test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- fixtures/     : pytest plugins providing DeferredValues in known states.
- helpers/      : Shared utilities (no tests here).

General guidance
- Everything in vow is synchronous; assert outcomes right after the call that
  should have produced them instead of waiting or sleeping.
- Threaded tests join with a timeout so a lost wake-up fails instead of hanging.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""
