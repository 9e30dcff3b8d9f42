"""
Tenant-scoped data access
"""
