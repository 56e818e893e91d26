"""
Licenses module - License entity and lifecycle.

This module handles:
- License entity and domain logic
- License document encoding and canonical payload
- License lifecycle (issue, verify, renew)
- JSON license file storage
"""
