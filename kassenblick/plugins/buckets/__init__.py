from .buckets_component import BucketsComponent


def register_components(plugin_manager):
    """Register Buckets component."""
    plugin_manager.register_component(BucketsComponent)
