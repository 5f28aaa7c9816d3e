"""
Domain package for commissioning documents.

Holds the immutable document records and the structural rules a document
must satisfy before it may consume rate budget.
"""
