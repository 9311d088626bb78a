"""
High score persistence.
"""
