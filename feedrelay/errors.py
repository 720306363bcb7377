class FeedRelayError(Exception):
    """Base class for failures that settle a bundle as ``error``."""
