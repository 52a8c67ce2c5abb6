"""Checklist platform plugin: checklist items exposed as switch accessories."""

PLUGIN_NAME = "homebridge-checklist-plugin"
PLATFORM_NAME = "ChecklistPlatform"

__version__ = "0.1.0"

__all__ = ["PLUGIN_NAME", "PLATFORM_NAME", "__version__"]
