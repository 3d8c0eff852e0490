"""
AssetStore implementations live here (infra adapters).
"""

__all__ = []
