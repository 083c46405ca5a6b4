"""
File: toolgateway/gateway/__init__.py
Purpose: The vendor-independent gateway core: plugin records, instance registry, tool catalogue,
    restrictions, argument validation and the dispatcher.
"""
