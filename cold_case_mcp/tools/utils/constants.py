# Constants for the archive terminal

# Decrypt "processing" delay, seconds
DEFAULT_DECRYPT_DELAY_SECONDS = 0.8

# Listing
DATE_PLACEHOLDER = "---- -- --"
TYPE_TAGS = {
    "directory": "<DIR>",
    "encrypted": "<ENC>",
    "text": "<TXT>",
}

# Search descriptors
FILENAME_MATCH_TAG = "[FILENAME MATCH]"
CONTENT_MATCH_TAG = "[CONTENT MATCH]"

# Assistant context
DEFAULT_CONTEXT_MAX_CHARS = 20000
LOCKED_SECTION_MARKER = "[STATUS: ENCRYPTED/LOCKED]"
UNLOCKED_SECTION_MARKER = "[STATUS: DECRYPTED]"
LOCKED_SECTION_NOTE = "(NOTE: you cannot read this file until the user decrypts it.)"
CONTEXT_TRUNCATED_NOTE = "[... further files omitted: context limit reached ...]"
