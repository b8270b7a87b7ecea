"""
Tests for the Live Intel Orchestrator.

This package contains tests for:
- Source registry and default sources
- Collector runner, health tracking and caching
- Alert aggregation
- Orchestrator lifecycle and single-flight runs
- Read API, dispatch adjustments and treasury insights
- Snapshot persistence and audit emission
"""
