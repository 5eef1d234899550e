"""REST service for MediaWiki source code linting."""

__version__ = "0.3.0"
