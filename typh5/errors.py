from contextlib import contextmanager


class ContainerError(Exception):
    """Base class for every error raised by typh5."""

    pass


class AlreadyOpen(ContainerError, OSError):
    pass


class EmptyTarget(ContainerError, ValueError):
    pass


class NotAContainer(ContainerError, OSError):
    pass


class NameCollision(ContainerError, ValueError):
    pass


class NotFound(ContainerError, KeyError):
    def __str__(self):
        # KeyError quotes its argument
        return str(self.args[0]) if self.args else ""


class WrongKind(ContainerError, TypeError):
    pass


class TypeMismatch(ContainerError, TypeError):
    pass


class CapacityExceeded(ContainerError, ValueError):
    pass


class InvalidArgument(ContainerError, ValueError):
    pass


class InvalidHandle(ContainerError, ValueError):
    pass


class NativeFailure(ContainerError, RuntimeError):
    """The HDF5 library reported an error after every precondition passed."""

    def __init__(self, operation, target=None, cause=None):
        self.operation = operation
        self.target = target
        self.cause = cause
        message = f"{operation} failed"
        if target is not None:
            message += f" for '{target}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


@contextmanager
def native_call(operation, target=None):
    """Surface errors reported by h5py/libhdf5 as NativeFailure."""
    try:
        yield
    except ContainerError:
        raise
    except (OSError, RuntimeError, KeyError, ValueError) as exc:
        raise NativeFailure(operation, target, exc) from exc
