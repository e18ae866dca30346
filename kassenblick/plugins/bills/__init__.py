from .bills_component import BillsComponent


def register_components(plugin_manager):
    """Register Bills component."""
    plugin_manager.register_component(BillsComponent)
