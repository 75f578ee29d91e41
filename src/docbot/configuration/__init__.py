"""
Configuration management for Docbot.

- **app_configuration.py**: YAML-backed ``AppConfig`` (``config/app_config.yml``)
  with the shared ``app_config`` instance.
- **chat_settings.py**: Typed view of the ``chat`` section (models, retrieval
  thresholds, context budget, retry policy, blocked words).
- **schedule_settings.py**: Typed view of the ``schedule`` section (mod-log
  channel, moderator roles, poll interval, schedulable commands).
"""
