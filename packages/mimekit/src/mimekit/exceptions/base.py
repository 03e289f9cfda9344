# mimekit/exceptions/base.py


class MimeKitError(Exception):
    """Base for all mimekit exceptions."""
