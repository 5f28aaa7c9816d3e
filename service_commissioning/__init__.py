"""
Commissioning service: submits goods-commissioning documents to the CRPT API.
"""
