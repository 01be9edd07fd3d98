"""
CLI subpackage: command groups and machine-aware output helpers.
"""
