"""
Failover Transport for Herald.

Tries transports in the declared priority order (primary, secondary,
...) and returns on the first success.
"""

from __future__ import annotations

from .composite import CompositeTransport


class FailoverTransport(CompositeTransport):
    """
    Always starts from the first transport.

    With [A(fails), B(succeeds), C]: returns B's result, C is never
    called. With retry_period > 0 a failed primary is bypassed on later
    calls until the period elapses.
    """

    NAME = "failover"

    def _start_index(self) -> int:
        return 0
