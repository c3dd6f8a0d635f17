from typh5.dataset import Dataset
from typh5.dataspace import Dataspace
from typh5.dtypes import VARIABLE, Datatype, DatatypeClass, StringEncoding
from typh5.errors import (AlreadyOpen, CapacityExceeded, ContainerError, EmptyTarget, InvalidArgument, InvalidHandle,
                          NameCollision, NativeFailure, NotAContainer, NotFound, TypeMismatch, WrongKind)
from typh5.file import File
from typh5.group import Group
from typh5.handle import Category, ResourceHandle
from typh5.link import Link
from typh5.node import Node
