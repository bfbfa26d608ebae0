from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from models import ScrapedInternship


EMBED_COLOR = 0x00B0F4
DEFAULT_FOOTER = "Bot de Pasantías • UADER FCyT"
DEFAULT_GREETING = "¡Atención estudiantes!"


@dataclass(frozen=True)
class DiscordConfig:
    webhook_url: Optional[str]
    role_id: Optional[str]
    footer: str
    timeout_seconds: int = 15


def load_discord_config_from_env() -> DiscordConfig:
    webhook_url = os.environ.get("DISCORD_WEBHOOK_URL", "").strip() or None
    role_id = os.environ.get("DISCORD_ROLE_ID", "").strip() or None
    footer = os.environ.get("DISCORD_FOOTER", "").strip() or DEFAULT_FOOTER
    return DiscordConfig(webhook_url=webhook_url, role_id=role_id, footer=footer)


def build_webhook_payload(
    posting: ScrapedInternship,
    *,
    role_id: Optional[str],
    footer: str = DEFAULT_FOOTER,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    mention = f"<@&{role_id}>" if role_id else DEFAULT_GREETING
    embed: dict[str, Any] = {
        "title": f"🎓 Nueva Oportunidad: {posting.origin}",
        "description": f"**{posting.title}**",
        "url": posting.url,
        "color": EMBED_COLOR,
        "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
        "footer": {"text": footer},
    }
    if posting.image_url:
        embed["image"] = {"url": posting.image_url}
    return {
        "content": f"{mention} 📢 **¡Atención estudiantes!** Se ha detectado una nueva pasantía.",
        "embeds": [embed],
    }


class DiscordNotifier:
    """Fire-and-forget Discord webhook delivery. No retries: `send` reports, the caller logs."""

    def __init__(self, config: DiscordConfig, *, logger: logging.Logger):
        self.config = config
        self.logger = logger
        if not config.webhook_url:
            self.logger.warning("DISCORD_WEBHOOK_URL is not set; notifications will be skipped")

    def send(self, posting: ScrapedInternship) -> Optional[bool]:
        """Return None when no webhook is configured, otherwise whether Discord accepted the post."""
        if not self.config.webhook_url:
            return None
        payload = build_webhook_payload(posting, role_id=self.config.role_id, footer=self.config.footer)
        try:
            resp = requests.post(self.config.webhook_url, json=payload, timeout=self.config.timeout_seconds)
        except requests.RequestException as e:
            self.logger.error("Discord send failed for %s: %s", posting.url, e)
            return False
        if not resp.ok:
            self.logger.error("Discord send failed for %s: %s %s", posting.url, resp.status_code, resp.reason)
            return False
        self.logger.info("Discord notification sent: %s", posting.title)
        return True


class NullNotifier:
    """Used with --no-notify: sends are skipped, never attempted."""

    def send(self, posting: ScrapedInternship) -> Optional[bool]:
        return None
