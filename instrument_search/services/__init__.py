"""
Service layer - orchestration of search and query history.
"""
