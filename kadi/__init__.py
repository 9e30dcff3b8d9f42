"""
Kadi - multi-tenant invoicing backend
"""
