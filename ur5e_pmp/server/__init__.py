"""
Server-side components: session state, FastAPI app and entry point.
"""
