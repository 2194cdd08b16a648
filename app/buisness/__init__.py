"""
Business layer for the inventory system.
Integrity rules, error kinds and operation deadlines, kept apart from
data persistence concerns.
"""
