"""
Todo list API backed by a single expiring Redis list.

Build the ASGI application with ``redis_todo.main.create_app`` or run the
server with ``python -m redis_todo``.
"""

__version__ = "0.1.0"
