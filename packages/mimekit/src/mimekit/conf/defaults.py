"""Default configuration values for mimekit."""

DEFAULTS: dict[str, object] = {
    # Format used when a message carries no (registered) format of its own
    "DEFAULT_FORMAT": "application/json",
    # Upper bound on bodies buffered by the sniff resolver
    "SNIFF_MAX_BODY_BYTES": 1024 * 1024,
    # Raise UnknownErrorTypeError instead of degrading to RemoteError
    "STRICT_ERROR_TYPES": False,
    # Freeze the codec registry once built-in codecs are registered
    "FREEZE_REGISTRIES": False,
    "BUILTIN_CODECS": ("json", "xml", "msgpack"),
}
