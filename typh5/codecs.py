import numpy as np
from h5py import h5t

from typh5 import config
from typh5.errors import CapacityExceeded, InvalidArgument, TypeMismatch


def encode_text(text, encoding):
    codec = config.CODECS[encoding.value]
    try:
        return text.encode(codec)
    except UnicodeEncodeError as exc:
        raise InvalidArgument(f"Cannot store {text!r} as {encoding.value} text: {exc}.") from exc


def decode_text(raw, encoding):
    if isinstance(raw, str):
        return raw
    if raw is None:
        return ""
    raw = bytes(raw).split(b"\0", 1)[0]
    try:
        return raw.decode(config.READ_CODECS[encoding.value])
    except UnicodeDecodeError as exc:
        raise TypeMismatch(f"Stored text {raw!r} is not valid {encoding.value}: {exc}.") from exc


def pack_variable(texts, encoding, shape):
    """Object buffer holding one encoded value per element."""
    buffers = [encode_text(text, encoding) for text in texts]
    arr = np.empty(shape, dtype=h5t.string_dtype(encoding.value))
    flat = arr.reshape(-1)
    for i, raw in enumerate(buffers):
        flat[i] = raw
    return arr


def pack_fixed(texts, encoding, width, shape):
    """Contiguous zero padded buffer of width bytes per element."""
    buffers = []
    for text in texts:
        raw = encode_text(text, encoding)
        # one byte stays free for the terminator
        if len(raw) + 1 > width:
            raise CapacityExceeded(f"{text!r} needs {len(raw) + 1} bytes, the stored width is {width}.")
        buffers.append(raw)

    arr = np.zeros(shape, dtype=f"S{width}")
    flat = arr.reshape(-1)
    for i, raw in enumerate(buffers):
        flat[i] = raw
    return arr


def unpack_text(arr, encoding):
    """Decode a variable or fixed-width buffer back to str values."""
    return [decode_text(raw, encoding) for raw in arr.reshape(-1)]
