"""
Application Layer - Use Cases and Business Logic Orchestration

Contains:
- search: keyword extraction, resilient provider calls, orchestration, ranking
"""
