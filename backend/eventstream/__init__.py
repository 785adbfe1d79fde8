"""Transactional audit event store backed by Kinesis Data Firehose and Athena.

Events recorded during a unit of work are shipped to Firehose after it
commits; stored events are searched through asynchronous Athena queries.
"""

__version__ = "0.1.0"
