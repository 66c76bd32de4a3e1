from verikit.core.ids import new_id
from verikit.core.timeout import assert_within_timeout, run_with_timeout
from verikit.core.urls import ServiceEndpoint, Urlifier

__all__ = [
    "ServiceEndpoint",
    "Urlifier",
    "assert_within_timeout",
    "new_id",
    "run_with_timeout",
]
