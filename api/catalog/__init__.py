"""
Read-only views that combine car resources for the public website.
"""
