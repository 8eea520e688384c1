"""Test suite for screener-dashboard.

This package contains tests for all modules:
- test_parser: Market table extraction and number parsing
- test_taxonomy: Category resolver lookups, counts and ordering
- test_view: Filter and sort derivation
- test_fetcher: Retrieval strategies, retry and attempt budget
- test_session: Load cycle, stale result handling and error states
- test_dataset: Recommendation dataset loading and legacy migration
- test_aggregator: Recommendation aggregation and category ordering
- test_server: HTTP relay responses
- test_cli: Command-line interface
"""
