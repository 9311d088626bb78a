"""
Game configuration: defaults, YAML loading and validation.
"""
