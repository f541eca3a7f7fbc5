"""
Startup modules for the Vesta command-line client.
"""
