"""
Authentication and account management for taskhub.

This package provides:
- User registration and login
- JWT token handling
- The bearer-token gate for protected routes
- Password change and account deletion
"""
