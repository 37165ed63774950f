"""
filecourier - ship finished files from a watched folder to a chat service.
"""

__version__ = "0.1.0"
