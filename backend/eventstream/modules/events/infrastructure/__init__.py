"""Firehose delivery, Athena querying and the record codec."""
