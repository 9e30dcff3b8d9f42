"""
Schemas module
"""
