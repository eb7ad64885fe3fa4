"""
Files on local disk that belong to database records.
"""
