"""Building blocks for HTTP services: handler chains, middlewares, logging, dates and SQL models."""

__version__ = "0.1.0"