from .filesystem import FileSystemAssetRegistry

# RedisAssetRegistry is imported from .redis_kv on demand.
__all__ = ["FileSystemAssetRegistry"]
