from .service import ContactService, ContactSubmission

__all__ = ["ContactService", "ContactSubmission"]
