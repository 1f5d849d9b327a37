"""
Test Suite for the KD-Tree Spatial Index

This package contains unit tests and integration tests for:
- KD-tree construction, insertion and query correctness
- Point capability helpers
- Synthetic data, timing utilities and the CLI

Run tests with: pytest -v
"""
