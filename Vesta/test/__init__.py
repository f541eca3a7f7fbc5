"""
Test package for the Vesta client.
"""
