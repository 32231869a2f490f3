"""
LoginGuard - login authentication with per-identity lockout.
"""
__version__ = "0.1.0"
