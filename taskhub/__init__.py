"""taskhub: task management backend with JWT authentication."""
