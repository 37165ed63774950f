"""
Utilities for filecourier:
- config.py - Settings loaded from the environment
- helpers.py - Small shared helpers
- paths.py - Turning changed paths into upload routing
"""
