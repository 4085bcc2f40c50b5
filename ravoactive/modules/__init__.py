"""
RavoActive Modules
==================

Flask blueprint modules for the waitlist service.
"""

__all__ = ['email', 'subscribers']
