"""
Centralized constants and defaults for Taskboard
"""

# Task status values
STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"
TASK_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

# Task priority values
PRIORITY_LOW = "Low"
PRIORITY_MEDIUM = "Medium"
PRIORITY_HIGH = "High"
TASK_PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)

# User roles
ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
USER_ROLES = (ROLE_ADMIN, ROLE_MEMBER)

# Store collections
USERS_COLLECTION = "users"
TASKS_COLLECTION = "tasks"

# Auth defaults
TOKEN_ALGORITHM = "HS256"
TOKEN_LIFETIME_DAYS = 7

# Dashboard defaults
RECENT_TASKS_LIMIT = 10

# Uploads
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif")
DEFAULT_UPLOAD_DIR = "uploads"

# Server defaults
DEFAULT_PORT = 8000
DEFAULT_STORE_URL = "memory://"
