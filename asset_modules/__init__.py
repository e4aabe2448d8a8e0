"""
Asset registry modules.

Modules layer: domain models, configuration, storage adapters and service
facades built on ``asset_kernel`` and ``asset_engines``.
"""
