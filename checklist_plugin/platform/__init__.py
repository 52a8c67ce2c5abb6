from .checklist_platform import ChecklistPlatform

__all__ = ["ChecklistPlatform"]
