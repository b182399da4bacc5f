"""Services package for memoryrank.

This package provides all core services using the plugin dependency injection pattern from scitrera-app-framework.

Prefer importing from specific service submodules (e.g., `from .memory import get_memory_service`)
rather than from this top-level package.
"""
