"""Storage layer of a small relational engine: paged files, a clock buffer pool, catalog records, join helpers and sample data."""

__version__ = "0.1.0"
__all__ = ["buffer", "datagen", "dbdestroy", "dbfile", "errors", "joinhash", "schema"]