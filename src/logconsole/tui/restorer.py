"""Layout restorer backed by the settings file.

Remembers which namespaces had a viewer open under the "layout" key and,
at startup, replays each namespace's recipe command.
"""

import logging

import logconsole.io.settings
from logconsole.core.commands import CommandRegistry
from logconsole.core.errors import ConfigurationLoadFailure
from logconsole.core.protocols import RestorationRecipe

logger = logging.getLogger(__name__)

LAYOUT_KEY = "layout"


class SettingsLayoutRestorer:
    def __init__(self) -> None:
        self._open: dict[str, str] = {}

    @property
    def open_namespaces(self) -> list[str]:
        return sorted(self._open)

    def track(self, namespace: str, widget_id: str) -> None:
        self._open[namespace] = widget_id
        self._save()

    def untrack(self, namespace: str) -> None:
        if self._open.pop(namespace, None) is not None:
            self._save()

    def _save(self) -> None:
        try:
            logconsole.io.settings.save_setting(LAYOUT_KEY, self.open_namespaces)
        except (ConfigurationLoadFailure, OSError) as exc:
            logger.warning("could not save layout: %s", exc)

    async def restore(self, recipe: RestorationRecipe, commands: CommandRegistry) -> None:
        try:
            saved = logconsole.io.settings.load_setting(LAYOUT_KEY, [])
        except ConfigurationLoadFailure as exc:
            logger.warning("could not read saved layout: %s", exc)
            return
        if not isinstance(saved, list) or recipe.namespace not in saved:
            return
        if commands.is_toggled(recipe.command):
            return
        logger.debug("restoring %s via %s", recipe.namespace, recipe.command)
        commands.execute(recipe.command, **recipe.args)
