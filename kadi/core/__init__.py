"""
Configuration, database, security and HTTP edge plumbing
"""
