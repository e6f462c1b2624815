from .base import RemoteRecordClient, keywords, unwrap_result

__all__ = ["RemoteRecordClient", "keywords", "unwrap_result"]
