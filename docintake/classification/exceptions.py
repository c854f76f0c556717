class RuleTableError(Exception):
    """Raised when a category rule table cannot be loaded or is invalid."""
