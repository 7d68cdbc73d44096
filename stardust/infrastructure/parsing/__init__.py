"""Model Response Parsing.

Recovers validated category assignments from raw, possibly truncated or
malformed, model output.
Bounded Context: Response Recovery
"""

from stardust.infrastructure.parsing.response_recovery import (
    parse_batch_classification,
    parse_single_classification,
)

__all__ = ['parse_batch_classification', 'parse_single_classification']
