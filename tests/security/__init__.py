"""Security tests for ConvoHub

This package contains security-focused tests:
- Authentication bypass attempts (forged, expired and misused tokens)
- Role escalation
- Tenant isolation
"""
