"""
Core module for shared domain infrastructure.

This module contains:
- Value objects, domain events and exceptions
- Synchronous in-memory event bus and audit log handler
- Atomic file helpers
"""
