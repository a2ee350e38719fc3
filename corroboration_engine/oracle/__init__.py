"""Evidence oracle boundary: payload parsing and retrying client."""

from corroboration_engine.oracle.client import (
    EvidenceOracle,
    OracleUnavailableError,
    RetryingOracleClient,
)
from corroboration_engine.oracle.payload_parser import parse_oracle_payload

__all__ = [
    "EvidenceOracle",
    "OracleUnavailableError",
    "RetryingOracleClient",
    "parse_oracle_payload",
]
