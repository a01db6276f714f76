"""
Core business logic package for Nomada.

Account identity, sessions and profile persistence live here.
Lambda handlers in src/handlers/ are thin wrappers that call into nomada/.
"""

__all__: list[str] = []
