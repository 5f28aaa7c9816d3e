"""
Commissioning service application package.
"""
