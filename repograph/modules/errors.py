# repograph/modules/errors.py

class RepoGraphError(Exception):
    pass


class FatalConfigurationError(RepoGraphError):
    """Configuration cannot be honoured (bad config file, palette too small...)."""
    pass


class FatalDataError(RepoGraphError):
    """Collected data breaks an invariant the analysis relies on."""
    pass
