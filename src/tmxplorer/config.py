"""Configuration constants for tmxplorer."""

# Source language used when the TMX header carries no srclang attribute.
DEFAULT_SOURCE_LANGUAGE: str = "en-US"

# Custom property holding the producing tool's external segment identifier.
# Its value is the key used by the id_prefix, id_partial and batch_id modes.
SEGMENT_ID_PROPERTY: str = "x-segment-id"

# Hard upper bound on positions returned by a single search.
RESULT_CAP: int = 2000

# Child elements that are always decoded as lists under the given parent,
# even when zero or one instance is present.
REPEATED_ELEMENTS: dict[str, tuple[str, ...]] = {
    "header": ("prop",),
    "body": ("tu",),
    "tu": ("tuv", "prop"),
    "tuv": ("prop",),
}

# Attribute key prefix and text key used in the decoded tree.
ATTRIBUTE_PREFIX: str = "@_"
TEXT_KEY: str = "#text"

# Result cards shown per page.
PAGE_SIZE: int = 20

# Quiet period before a free-text query change is sent to the engine.
DEBOUNCE_SECONDS: float = 0.3

# Capacity of the request and reply queues between caller and engine.
CHANNEL_SIZE: int = 16

# Documents above this size get a warning before parsing starts.
LARGE_FILE_BYTES: int = 50 * 1024 * 1024
