"""Self-contained chat-bot features: SQLite stores, command parsing, reply formatting and image composition."""

__version__ = "0.1.0"
__all__ = [
    "diana",
    "driftbottle",
    "funny",
    "event",
    "emojimix",
    "epidemic",
    "dress",
    "github",
    "font",
    "fortune",
    "genshin",
]