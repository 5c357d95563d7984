"""
Storage key encoding for config entries.

Partition key: ``APP#{app}``
Sort key:      ``ENV#{environment}#SCREEN#{screen}#KEY#{key}``

Listing all config for an app and environment is a ``begins_with`` query on
``ENV#{environment}``. Components are not escaped; screen and key validation
only admits ``[a-z0-9_]`` so ``#`` never appears inside a component.
"""
APP_PREFIX = "APP#"
ENV_PREFIX = "ENV#"
SCREEN_SEGMENT = "#SCREEN#"
KEY_SEGMENT = "#KEY#"


def partition_key(app: str) -> str:
    return f"{APP_PREFIX}{app}"


def sort_key_prefix(environment: str) -> str:
    return f"{ENV_PREFIX}{environment}"


def sort_key(environment: str, screen: str, key: str) -> str:
    return f"{sort_key_prefix(environment)}{SCREEN_SEGMENT}{screen}{KEY_SEGMENT}{key}"
