class ImportCancelledError(Exception):
    """The import was cancelled between stages."""
