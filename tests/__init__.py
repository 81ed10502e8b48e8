"""
Test package marker, so modules import as `tests.test_*` with the repository root on the path.
"""
