"""
Core domain layer.

Document processing pipeline and the exception hierarchy shared by
every layer of the service.
"""
