"""Channel adapter registry — pluggable email dispatch.

The adapter is picked from ``NotificationSettings.email_channel``: ``fake``
keeps messages in memory, ``log`` writes them to the application log.
"""

from marketplace.config import get_settings

_channel_instances: dict[str, object] = {}


def get_email_channel():
    """Return the configured email adapter (one instance per process)."""
    channel_type = get_settings().notifications.email_channel
    if channel_type not in _channel_instances:
        if channel_type == "fake":
            from marketplace.notifications.channel.fake_email import FakeEmailAdapter

            _channel_instances[channel_type] = FakeEmailAdapter()
        elif channel_type == "log":
            from marketplace.notifications.channel.log_email import LogEmailAdapter

            _channel_instances[channel_type] = LogEmailAdapter()
        else:
            raise ValueError(f"Unknown email channel: {channel_type}")

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
