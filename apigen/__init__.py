"""Generate TypeScript types and fetch clients from Swagger 2.0 documents."""

__version__ = "0.1.0"
