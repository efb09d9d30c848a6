"""
Task List API package.

The FastAPI application lives in task_api.main; build one around a given
store with task_api.main.create_app.
"""

__version__ = "0.1.0"
