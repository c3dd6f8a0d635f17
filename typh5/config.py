"""
    Configuration constants for typh5.
"""
from h5py import h5f

"""
    Format signature found at the start of the HDF5 superblock.
"""
SIGNATURE = b"\x89HDF\r\n\x1a\n"

"""
    The superblock is searched for at byte 0 and then at 512, 1024, 2048, ...
    (after a user block). Searching stops past this offset.
"""
MAX_SUPERBLOCK_OFFSET = 2 ** 30

"""
    Mode used by File.open() when none is given: read-write.
"""
DEFAULT_MODE = "r+"

"""
    Python codecs used to encode text for each HDF5 character set.
"""
CODECS = {
    "ascii": "ascii",
    "utf-8": "utf-8",
}

"""
    Python codecs used to decode stored text. ASCII storage written by other
    tools often holds 8-bit bytes, so it is read as latin-1.
"""
READ_CODECS = {
    "ascii": "latin-1",
    "utf-8": "utf-8",
}

"""
    Character set and length given to text values that carry no stored type.
"""
DEFAULT_TEXT_ENCODING = "utf-8"

"""
    Closing a file closes every object opened from it.
"""
CLOSE_DEGREE = h5f.CLOSE_STRONG
