"""Domain-specific configuration for commits and pushes."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig

DEFAULT_COMMIT_TEMPLATE = "feat: {title} ({id})"


class CommitConfig(BaseDomainConfig):
    """Accessor for the ``commit`` section."""

    def _config_section(self) -> str:
        return "commit"

    @cached_property
    def auto_commit(self) -> bool:
        return bool(self.section.get("auto_commit", True))

    @cached_property
    def auto_link(self) -> bool:
        return bool(self.section.get("auto_link", True))

    @cached_property
    def template(self) -> str:
        return str(self.section.get("template") or DEFAULT_COMMIT_TEMPLATE)

    @cached_property
    def auto_push(self) -> bool:
        return bool(self.section.get("auto_push", False))

    @cached_property
    def remote(self) -> str:
        return str(self.section.get("remote") or "origin")

    def render_message(self, *, title: str, feature_id: str, action: str = "") -> str:
        """Fill ``{title}``/``{name}``, ``{id}`` and ``{action}`` in the commit template.

        A template without placeholders falls back to ``"<action> feature: <title>"``.
        """
        template = self.template
        message = (
            template.replace("{title}", title)
            .replace("{name}", title)
            .replace("{id}", feature_id)
            .replace("{action}", action)
        )
        if message == template:
            return f"{action or 'Update'} feature: {title}"
        return message


__all__ = ["CommitConfig", "DEFAULT_COMMIT_TEMPLATE"]
