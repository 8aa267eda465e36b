"""
Shared utilities: record types, geographic keys and diagnostics
"""
