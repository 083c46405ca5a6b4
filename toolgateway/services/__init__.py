"""Streaming session state and JSON-RPC handling"""
