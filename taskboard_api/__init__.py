"""
Taskboard API - FastAPI server for task assignment and progress tracking
"""

__version__ = "0.1.0"
