"""
TaskNest Backend Application Package

Personal reminders and categories API with an admin console for user management.
"""
