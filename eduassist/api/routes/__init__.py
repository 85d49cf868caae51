"""API route modules."""

from eduassist.api.routes import assessment, auth, chat, content, files, subscriptions, support

__all__ = ["assessment", "auth", "chat", "content", "files", "subscriptions", "support"]
