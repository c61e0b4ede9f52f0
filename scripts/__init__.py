"""
Operational scripts (seeding).
"""
