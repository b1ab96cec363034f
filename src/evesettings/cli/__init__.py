"""
Initialize the CLI package. Contains shared CLI utilities and configuration.
"""
