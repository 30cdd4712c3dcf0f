"""Add-to-home-screen banner state."""

from __future__ import annotations

import re
from typing import Any, Optional

IOS_PATTERN = re.compile(r'iphone|ipad|ipod', re.IGNORECASE)
IOS_INSTRUCTIONS = 'To install this app on your iPhone/iPad, tap the Share icon and then "Add to Home Screen".'


class InstallPrompt:
    def __init__(self, user_agent: str = '', standalone: bool = False):
        self.deferred_prompt: Any = None
        self.installed = standalone
        self.is_ios = bool(IOS_PATTERN.search(user_agent or ''))
        # iOS never fires beforeinstallprompt, so the banner shows on its own
        self.visible = self.is_ios and not standalone

    @property
    def shown(self) -> bool:
        return self.visible and not self.installed

    def on_before_install_prompt(self, event: Any):
        self.deferred_prompt = event
        self.visible = True

    def on_app_installed(self):
        self.installed = True
        self.visible = False
        self.deferred_prompt = None

    def install(self) -> Optional[str]:
        """Fire the deferred browser prompt, or return the manual instructions."""
        prompt, self.deferred_prompt = self.deferred_prompt, None
        self.visible = False
        if prompt is not None:
            prompt.prompt()
            return None
        return IOS_INSTRUCTIONS

    def dismiss(self):
        self.visible = False
