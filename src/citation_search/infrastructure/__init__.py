"""
Infrastructure Layer - external literature sources.
"""
