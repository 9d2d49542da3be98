"""Error catalog for entitlement decisions"""
from planguard.decision.error_codes import ErrorCode, ErrorCodeDictionary, ErrorSeverity

__all__ = ["ErrorCode", "ErrorCodeDictionary", "ErrorSeverity"]
