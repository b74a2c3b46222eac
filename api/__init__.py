"""
HTTP surface of the impact engine
"""
