"""
Editable page text and the small lookups the site layout needs.
"""
