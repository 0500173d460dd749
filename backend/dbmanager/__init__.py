"""
Dynamic Database Manager - schema-flexible document data layer on MongoDB.
"""
