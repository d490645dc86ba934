from __future__ import annotations

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
DISCORD_API_TIMEOUT_SECONDS = 10.0
