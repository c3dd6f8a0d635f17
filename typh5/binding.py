"""
    Mapping between Python values and HDF5 datatypes, dataspaces and buffers.

    Numeric values go through a numpy buffer that HDF5 reads or fills
    directly. Text never exposes a raw buffer: it is packed per element by
    typh5.codecs, either as variable-length strings or as fixed-width slots.
"""
import numpy as np
from h5py import h5t

from typh5 import codecs, config
from typh5.dataspace import Dataspace
from typh5.dtypes import NUMERIC_KINDS, VARIABLE, Datatype, DatatypeClass, StringEncoding
from typh5.errors import InvalidArgument, TypeMismatch

_NUMBERS = (bool, int, float, np.bool_, np.integer, np.floating)


def natural_dtype(value):
    if isinstance(value, (bool, np.bool_)):
        return np.dtype(bool)
    elif isinstance(value, int):
        return np.dtype(np.int64)
    elif isinstance(value, float):
        return np.dtype(np.float64)
    elif isinstance(value, (np.generic, np.ndarray)):
        dtype = value.dtype
    else:
        try:
            arr = np.asarray(value)
        except ValueError as exc:
            raise TypeMismatch(f"Cannot bind {type(value).__name__} value: {exc}.") from exc
        if arr.ndim > 1:
            raise TypeMismatch(f"Only one dimensional sequences can be bound, got {arr.ndim} dimensions.")
        dtype = np.dtype(np.int64) if arr.dtype.kind == "i" else arr.dtype

    if dtype.kind not in NUMERIC_KINDS:
        raise TypeMismatch(f"Cannot bind values of dtype {dtype}.")
    return dtype


def storage_dtype(dtype):
    dtype = np.dtype(dtype)
    return np.dtype(np.uint8) if dtype.kind == "b" else dtype


def memory_dtype(dtype, datatype):
    """In-memory dtype for reading a numeric datatype, honouring an override."""
    if dtype is None:
        return datatype.dtype
    dtype = np.dtype(dtype)
    if dtype.kind not in NUMERIC_KINDS:
        raise TypeMismatch(f"Cannot read numeric data as {dtype}.")
    return dtype


class ValueBinding:
    text = False
    sequence = False

    def dataspace(self, value):
        raise NotImplementedError

    def datatype(self, value):
        raise NotImplementedError

    def count(self, value):
        raise NotImplementedError


class ScalarBinding(ValueBinding):
    def dataspace(self, value):
        return Dataspace.scalar()

    def datatype(self, value):
        return Datatype.from_dtype(natural_dtype(value))

    def count(self, value):
        return 1

    def buffer(self, value, dtype=None):
        dtype = natural_dtype(value) if dtype is None else dtype
        try:
            return np.array(value, dtype=storage_dtype(dtype))
        except (OverflowError, ValueError) as exc:
            raise TypeMismatch(f"Cannot store {value!r} as {dtype}: {exc}.") from exc

    def allocate(self, dtype, size):
        if size != 1:
            raise TypeMismatch(f"A single value was requested but {size} elements are stored.")
        return np.zeros((), dtype=storage_dtype(dtype))

    def unpack(self, buf, dtype):
        value = buf[()]
        return np.bool_(value) if np.dtype(dtype).kind == "b" else value


class ArrayBinding(ValueBinding):
    sequence = True

    def dataspace(self, value):
        return Dataspace((len(value),))

    def datatype(self, value):
        return Datatype.from_dtype(natural_dtype(value))

    def count(self, value):
        return len(value)

    def buffer(self, value, dtype=None):
        dtype = natural_dtype(value) if dtype is None else dtype
        try:
            arr = np.ascontiguousarray(value, dtype=storage_dtype(dtype))
        except (OverflowError, ValueError) as exc:
            raise TypeMismatch(f"Cannot store the sequence as {dtype}: {exc}.") from exc
        if arr.ndim != 1:
            raise TypeMismatch(f"Only one dimensional sequences can be bound, got {arr.ndim} dimensions.")
        return arr

    def allocate(self, dtype, size):
        return np.zeros(size, dtype=storage_dtype(dtype))

    def unpack(self, buf, dtype):
        return buf.astype(bool) if np.dtype(dtype).kind == "b" else buf


class TextBinding(ValueBinding):
    text = True

    def dataspace(self, value):
        return Dataspace.scalar()

    def datatype(self, value):
        return Datatype.variable_string(StringEncoding(config.DEFAULT_TEXT_ENCODING))

    def count(self, value):
        return 1

    def values(self, value):
        return [value]

    def shape(self, size):
        if size != 1:
            raise TypeMismatch(f"A single text value was requested but {size} elements are stored.")
        return ()

    def unpack(self, texts):
        return texts[0]

    def write(self, write, value, datatype):
        """Pack value for datatype and hand the buffer to write(buf, mtype).

        mtype is None for variable-length text, so h5py converts the Python
        objects, and the stored fixed-width type otherwise.
        """
        encoding, length = datatype.get_string_traits()
        texts = self.values(value)
        shape = self.shape(len(texts))
        if length == VARIABLE:
            write(codecs.pack_variable(texts, encoding, shape), None)
        else:
            write(codecs.pack_fixed(texts, encoding, length, shape), datatype._oid)

    def read(self, read, datatype, size):
        encoding, length = datatype.get_string_traits()
        shape = self.shape(size)
        if size == 0:
            return self.unpack([])

        if length == VARIABLE:
            buf = np.empty(shape, dtype=h5t.string_dtype(encoding.value))
            read(buf, None)
        else:
            buf = np.zeros(shape, dtype=f"S{length}")
            read(buf, datatype._oid)
        return self.unpack(codecs.unpack_text(buf, encoding))


class TextArrayBinding(TextBinding):
    sequence = True

    def dataspace(self, value):
        return Dataspace((len(value),))

    def count(self, value):
        return len(value)

    def values(self, value):
        return list(value)

    def shape(self, size):
        return (size,)

    def unpack(self, texts):
        return texts


SCALAR = ScalarBinding()
ARRAY = ArrayBinding()
TEXT = TextBinding()
TEXT_ARRAY = TextArrayBinding()


def binding_for_value(value):
    if isinstance(value, str):
        return TEXT
    elif isinstance(value, _NUMBERS):
        return SCALAR
    elif isinstance(value, np.ndarray):
        if value.ndim == 0 and value.dtype.kind != "U":
            return SCALAR
        elif value.ndim != 1:
            raise TypeMismatch(f"Only one dimensional arrays can be bound, got {value.ndim} dimensions.")
        return TEXT_ARRAY if value.dtype.kind == "U" else ARRAY
    elif isinstance(value, (list, tuple)):
        if value and all(isinstance(v, str) for v in value):
            return TEXT_ARRAY
        elif any(isinstance(v, str) for v in value):
            raise TypeMismatch("Cannot bind a sequence mixing text and numbers.")
        return ARRAY
    raise TypeMismatch(f"Cannot bind values of type {type(value).__name__}.")


def binding_for_read(text, dataspace, sequence=None):
    if sequence is None:
        sequence = not dataspace.is_scalar()
    if text:
        return TEXT_ARRAY if sequence else TEXT
    return ARRAY if sequence else SCALAR


def fitted(call, dataspace):
    """Wrap call(buf, mtype) so buf is viewed with the dimensions of dataspace."""
    dims = dataspace.dimensions() if dataspace.rank else ()

    def wrapper(buf, mtype):
        call(buf.reshape(dims), mtype)

    return wrapper


def write_value(write, value, datatype, dataspace, memsize=None, memtype=None):
    """Write value into storage of the given datatype and dataspace.

    write(buf, mtype) performs the single native call. Every precondition is
    checked before it runs.
    """
    binding = binding_for_value(value)
    clazz = datatype.get_class()
    if clazz is DatatypeClass.UNSUPPORTED:
        raise TypeMismatch("Cannot write into a datatype of unsupported class.")
    if binding.text != (clazz is DatatypeClass.STRING):
        stored = "text" if clazz is DatatypeClass.STRING else "numeric"
        raise TypeMismatch(f"Cannot write a {type(value).__name__} value into {stored} storage.")

    size = dataspace.size()
    count = binding.count(value)
    if memsize is not None and memsize != count:
        raise TypeMismatch(f"The memory dataspace selects {memsize} elements but the value has {count}.")
    if count != size:
        raise TypeMismatch(f"The value has {count} elements but the storage holds {size}.")
    if size == 0:
        return

    if binding.text:
        binding.write(fitted(write, dataspace), value, memtype if memtype is not None else datatype)
        return

    if memtype is not None:
        if memtype.get_class() not in (DatatypeClass.INTEGER, DatatypeClass.FLOAT):
            raise TypeMismatch("Numeric values need a numeric memory datatype.")
        fitted(write, dataspace)(binding.buffer(value, memtype.dtype), memtype._oid)
        return

    buf = binding.buffer(value)
    with Datatype.from_dtype(buf.dtype) as memtype:
        fitted(write, dataspace)(buf, memtype._oid)


def read_value(read, datatype, dataspace, dtype=None, sequence=None):
    """Read a value of the given datatype through read(buf, mtype)."""
    clazz = datatype.get_class()
    if clazz is DatatypeClass.UNSUPPORTED:
        raise TypeMismatch("Cannot read a datatype of unsupported class.")

    text = clazz is DatatypeClass.STRING
    if text and dtype not in (None, str):
        raise TypeMismatch(f"Text storage cannot be read as {dtype}.")
    if not text and dtype is str:
        raise TypeMismatch("Numeric storage cannot be read as text.")

    binding = binding_for_read(text, dataspace, sequence)
    size = dataspace.size()
    if text:
        if len(dataspace.dimensions()) > 1:
            raise InvalidArgument(f"Text arrays must be one dimensional, got {dataspace.dimensions()}.")
        return binding.read(fitted(read, dataspace), datatype, size)

    mdtype = memory_dtype(dtype, datatype)
    buf = binding.allocate(mdtype, size)
    if buf.size:
        with Datatype.from_dtype(buf.dtype) as memtype:
            fitted(read, dataspace)(buf, memtype._oid)
    return binding.unpack(buf, mdtype)
