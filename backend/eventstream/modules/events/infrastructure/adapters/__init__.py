from .athena_adapter import AthenaQueryClient, QueryStatus, ResultPage
from .firehose_adapter import FirehoseDeliveryClient

__all__ = [
    "AthenaQueryClient",
    "FirehoseDeliveryClient",
    "QueryStatus",
    "ResultPage",
]
