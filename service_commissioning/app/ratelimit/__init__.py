"""
Rate limiting package for the commissioning service.

Holds the process-wide gate that serializes submissions and keeps
consecutive calls to the remote API at least one interval apart.
"""
