from authstarter.mail.base import EmailSender
from authstarter.mail.dispatcher import EmailDispatcher
from authstarter.mail.resend import ResendEmailSender

__all__ = ["EmailSender", "EmailDispatcher", "ResendEmailSender"]
