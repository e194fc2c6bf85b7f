from .records import as_records, record_field

__all__ = ["as_records", "record_field"]
