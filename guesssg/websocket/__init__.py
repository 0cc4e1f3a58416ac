"""
WebSocket Package

Flask-SocketIO event handlers.
"""
