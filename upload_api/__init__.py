"""
Upload API - storage adapter resolution for file uploads.
"""
