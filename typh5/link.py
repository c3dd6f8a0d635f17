import logging

from h5py import h5, h5l, h5o, h5p, h5t

from typh5.errors import native_call
from typh5.handle import Category

_KINDS = {
    h5o.TYPE_GROUP: Category.GROUP,
    h5o.TYPE_DATASET: Category.DATASET,
    h5o.TYPE_NAMED_DATATYPE: Category.DATATYPE,
}


def link_create_plist():
    """Link names are stored as UTF-8, missing parents are created."""
    lcpl = h5p.create(h5p.LINK_CREATE)
    lcpl.set_char_encoding(h5t.CSET_UTF8)
    lcpl.set_create_intermediate_group(True)
    return lcpl


def object_kind(gid, name):
    """Kind of the object a link points to; OTHER when a soft or external link dangles."""
    raw = name.encode("utf-8")
    with native_call("get link info", name):
        link_type = gid.links.get_info(raw).type

    if link_type != h5l.TYPE_HARD:
        try:
            info = h5o.get_info(gid, raw)
        except (OSError, RuntimeError, KeyError, ValueError) as exc:
            logging.debug(f"Link {name} does not resolve: {exc}.")
            return Category.OTHER
    else:
        with native_call("get_info", name):
            info = h5o.get_info(gid, raw)
    return _KINDS.get(info.type, Category.OTHER)


class Link:
    def __init__(self, name, kind):
        self._name = name
        self._kind = kind

    @property
    def name(self):
        return self._name

    @property
    def kind(self):
        return self._kind

    def solve(self, group):
        """Open the linked object below group."""
        return group.open(self._name)

    def __str__(self):
        return f"Link(kind={self._kind.value}, name={self._name})"

    def __repr__(self):
        return self.__str__()


def iter_links(gid, creation_order=False):
    """Links of an open group, by name or by creation order."""
    names = []
    index_type = h5.INDEX_CRT_ORDER if creation_order else h5.INDEX_NAME
    with native_call("iterate links"):
        gid.links.iterate(names.append, idx_type=index_type, order=h5.ITER_INC)

    for raw in names:
        name = raw.decode("utf-8")
        yield Link(name, object_kind(gid, name))
