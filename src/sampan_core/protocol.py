"""Samsung SEF trailer constants.

Single source of truth for on-disk magic values and record layouts.
Keep this file stable. Reader and synthesizer must remain synchronized.
"""

# Trailer magics
MAGIC_FOOTER = b"SEFT"  # Last 4 bytes of the file
MAGIC_HEADER = b"SEFH"  # Start of the trailer header

SUPPORTED_VERSIONS = frozenset({101, 103, 105, 106})

# Footer: [TrailerLength(4) | Magic(4)] = 8 bytes
FOOTER_FMT = "<I4s"
FOOTER_LEN = 8

# Header: [Magic(4) | Version(4) | EntryCount(4)] = 12 bytes
HEADER_FMT = "<4sII"
HEADER_LEN = 12

# Entry descriptor: [Unused(2) | Type(2) | DataOffset(4) | Unused(4)] = 12 bytes.
# Only the first 8 bytes are read back.
ENTRY_FMT = "<2xHI4x"
ENTRY_LEN = 12
ENTRY_READ_FMT = "<2xHI"
ENTRY_READ_LEN = 8

# Entry data prefix: [Unused(2) | Type(2)]
DATA_FMT = "<2xH"
DATA_LEN = 4

# Footer + header, before any descriptors
FOOTER_REGION_BASE = FOOTER_LEN + HEADER_LEN

# JPEG end-of-image marker
EOI = b"\xff\xd9"


def footer_region_length(count: int) -> int:
    """Bytes from the trailer header to EOF for `count` entries."""
    return FOOTER_REGION_BASE + count * ENTRY_LEN
