"""
Filesystem watching

- filesystem.py - watchdog handler and the queue-backed event source
- filter.py - Deciding which raw events are finished writes
"""
