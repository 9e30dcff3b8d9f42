"""
Domain services: totals, pagination, catalog sanitizing, PDF, AI and mail
"""
