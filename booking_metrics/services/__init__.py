"""Pipeline services: field interpreters, record processing, aggregation."""
