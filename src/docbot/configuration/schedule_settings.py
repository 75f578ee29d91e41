from typing import Any, Dict, List

DEFAULT_SUPPORTED_COMMANDS = ["ban", "slowmode", "timeout", "unban", "untimeout", "warn"]


class ScheduleSettings:
    """Typed accessors for the ``schedule:`` section of the app configuration."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def mod_logs_channel_id(self) -> int | None:
        value = self.data.get("mod_logs_channel_id")
        try:
            return int(value) if value else None
        except (TypeError, ValueError):
            return None

    @property
    def permitted_role_ids(self) -> List[int]:
        roles = self.data.get("permitted_role_ids", [])
        if not isinstance(roles, list):
            return []
        result: List[int] = []
        for role in roles:
            try:
                result.append(int(role))
            except (TypeError, ValueError):
                continue
        return result

    @property
    def poll_interval_seconds(self) -> float:
        return float(self.data.get("poll_interval_seconds", 5.0))

    @property
    def supported_commands(self) -> List[str]:
        """Names of the commands that may be scheduled (allow-list)."""
        commands = self.data.get("supported_commands")
        if not isinstance(commands, list) or not commands:
            return list(DEFAULT_SUPPORTED_COMMANDS)
        return [str(name).lower() for name in commands]
