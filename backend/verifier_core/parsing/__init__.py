from .record_parser import RecordParseError, parse_record, resolve_submitter_name

__all__ = ["RecordParseError", "parse_record", "resolve_submitter_name"]
