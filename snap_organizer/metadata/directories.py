"""
Directory (IFD) tree rebuilt from exifread's flat tag dictionary.

exifread returns keys of the form "<IFD name> <TagName>". The tree groups
those tags back under their directories so they can be visited parent-first,
with occurrence indices and fully-qualified paths attached.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

# exifread IFD name -> (ifd path, parent IFD name)
# Order matters: siblings are visited in this order.
DIRECTORY_LAYOUT = {
    'Image': ('IFD', None),
    'Thumbnail': ('IFD', None),
    'EXIF': ('IFD/Exif', 'Image'),
    'Interoperability': ('IFD/Exif/Iop', 'EXIF'),
    'GPS': ('IFD/GPSInfo', 'Image'),
}
TOP_LEVEL_INDEX = {'Image': 0, 'Thumbnail': 1}

_KEY_RE = re.compile(r'^(IFD \d+|\S+) (.+)$')
_EXTRA_IFD_RE = re.compile(r'^IFD (\d+)$')


def split_key(key: str) -> Optional[Tuple[str, str]]:
    """'EXIF DateTimeOriginal' -> ('EXIF', 'DateTimeOriginal')."""
    m = _KEY_RE.match(key)
    if not m:
        return None
    return m.group(1), m.group(2)


@dataclass
class DirectoryNode:
    name: str
    ifd_path: str
    fq_ifd_path: str
    ifd_index: int
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    tags: List[Tuple[str, Any]] = field(default_factory=list)


class DirectoryTree:
    """
    Arena of DirectoryNodes. Parent/child links are indices into `nodes`.
    """

    def __init__(self):
        self.nodes: List[DirectoryNode] = []
        self.roots: List[int] = []
        self._by_name: Dict[str, int] = {}

    @classmethod
    def from_tags(cls, tags: Dict[str, Any]) -> "DirectoryTree":
        tree = cls()
        for key, tag in tags.items():
            # Thumbnails and other raw blobs are not IfdTags
            if not hasattr(tag, 'field_type'):
                continue

            parsed = split_key(key)
            if parsed is None:
                logging.debug(f"Unparseable EXIF key: {key!r}")
                continue

            ifd_name, tag_name = parsed
            idx = tree.node_index(ifd_name)
            if idx is None:
                logging.debug(f"Ignoring tag from unmapped directory: {key!r}")
                continue
            tree.nodes[idx].tags.append((tag_name, tag))
        return tree

    def node_index(self, ifd_name: str) -> Optional[int]:
        """Returns the arena index for an IFD name, creating it (and its parents) on demand."""
        if ifd_name in self._by_name:
            return self._by_name[ifd_name]

        if ifd_name in DIRECTORY_LAYOUT:
            ifd_path, parent_name = DIRECTORY_LAYOUT[ifd_name]
        else:
            m = _EXTRA_IFD_RE.match(ifd_name)
            if not m:
                return None
            ifd_path, parent_name = 'IFD', None

        if parent_name is None:
            index = TOP_LEVEL_INDEX.get(ifd_name)
            if index is None:
                index = int(_EXTRA_IFD_RE.match(ifd_name).group(1))
            fq_path = ifd_path if index == 0 else f"{ifd_path}{index}"
            node = DirectoryNode(ifd_name, ifd_path, fq_path, index)
            idx = self._add(node)
            self.roots.append(idx)
            self.roots.sort(key=lambda i: self.nodes[i].ifd_index)
        else:
            parent_idx = self.node_index(parent_name)
            parent = self.nodes[parent_idx]
            leaf = ifd_path.rsplit('/', 1)[-1]
            node = DirectoryNode(ifd_name, ifd_path, f"{parent.fq_ifd_path}/{leaf}", 0, parent=parent_idx)
            idx = self._add(node)
            parent.children.append(idx)
            parent.children.sort(key=lambda i: _layout_rank(self.nodes[i].name))

        self._by_name[ifd_name] = idx
        return idx

    def _add(self, node: DirectoryNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def walk(self) -> Iterator[Tuple[DirectoryNode, str, Any]]:
        """
        Depth-first, pre-order: a directory's tags, then its sub-directories,
        then the next top-level IFD.
        """
        stack = list(reversed(self.roots))
        while stack:
            node = self.nodes[stack.pop()]
            for tag_name, tag in node.tags:
                yield node, tag_name, tag
            stack.extend(reversed(node.children))


def _layout_rank(name: str) -> int:
    names = list(DIRECTORY_LAYOUT)
    return names.index(name) if name in names else len(names)
