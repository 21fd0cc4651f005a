"""
blogstore: async data-access layer for users, posts and comments
"""
__version__ = "1.0.0"
