"""
Services package: transactional operations over the blog models
"""
