"""Record ingestion: fan-out, validation, conversion, deduplication and engagement."""
