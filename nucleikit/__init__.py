"""Template metadata, catalog, filters, configuration, options and update tooling for a template-based scanner."""

__version__ = "2.5.1"