"""
File: toolgateway/models/__init__.py
Purpose: Package initializer for Pydantic request/response models used by the gateway core and
    both protocol surfaces.
"""
