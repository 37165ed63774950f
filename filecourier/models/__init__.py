"""
Data models shared across filecourier.
"""
