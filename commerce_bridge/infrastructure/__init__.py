"""
Infrastructure components for Commerce Bridge.

Authentication, caching, retries and error handling shared by every tool module.
"""
