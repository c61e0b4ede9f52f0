"""
Test suite for the poultry storefront backend.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_seed_service.py -v
"""
