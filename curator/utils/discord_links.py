def message_link(guild_id: str | None, channel_id: str, message_id: str) -> str | None:
    """Jump URL for a guild message; None when the guild is unknown."""
    if not guild_id:
        return None
    return f"https://discord.com/channels/{guild_id}/{channel_id}/{message_id}"
