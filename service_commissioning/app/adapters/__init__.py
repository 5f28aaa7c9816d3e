"""
Adapters for the remote CRPT API: request encoding and submission.
"""
