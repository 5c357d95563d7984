from remote_config.models.config_entry import ConfigEntryRow  # noqa: F401
