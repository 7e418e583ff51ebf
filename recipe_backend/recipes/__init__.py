"""
Recipe catalogue: multi-language recipe documents and their CRUD operations.
"""
