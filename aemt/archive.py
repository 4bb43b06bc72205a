"""Reading, editing and writing the KKIIDDZZ HED/DAT/BNS archive set."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional, Union

from aemt.errors import AemtError, InvalidLengthError, OutOfBoundsError
from aemt.metadata import Metadata, MetadataRegistry

SECTOR_SIZE = 2048
HED_SIZE = 0x800
HED_ENTRY_SIZE = 4
STR_FIRST_INDEX = 0x700 // HED_ENTRY_SIZE
MAX_SECTORS = (1 << 12) - 1

HED_NAME = "KKIIDDZZ.HED"
DAT_NAME = "KKIIDDZZ.DAT"
BNS_NAME = "KKIIDDZZ.BNS"

_OFFSET_MASK = 0xFFFFF
_LENGTH_MASK = 0xFFF
_U32_MASK = 0xFFFFFFFF
_HED_STRUCT = struct.Struct("<I")

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class HedEntry:
    """One HED slot: a 20-bit sector offset and a 12-bit sector count."""

    offset: int = 0
    length: int = 0

    @classmethod
    def from_int(cls, value: int) -> "HedEntry":
        """Unpack an entry from its 32-bit packed form."""
        value &= _U32_MASK
        return cls(offset=value & _OFFSET_MASK, length=(value >> 20) & _LENGTH_MASK)

    @classmethod
    def from_bytes(cls, data: bytes) -> "HedEntry":
        """Unpack an entry from four little-endian bytes."""
        if len(data) != HED_ENTRY_SIZE:
            raise InvalidLengthError(
                f"HED entry must be {HED_ENTRY_SIZE} bytes long, got {len(data)}"
            )
        (value,) = _HED_STRUCT.unpack(bytes(data))
        return cls.from_int(value)

    def to_int(self) -> int:
        """Pack the entry into its 32-bit form."""
        return ((self.length << 20) | self.offset) & _U32_MASK

    def to_bytes(self) -> bytes:
        """Pack the entry into four little-endian bytes."""
        return _HED_STRUCT.pack(self.to_int())


class FileType(Enum):
    EMPTY = "Empty"
    DAT = "DAT"
    BNS = "BNS"
    STR = "STR"

    def __str__(self) -> str:
        return self.value


@dataclass
class KidzFile:
    """An archive entry together with its contents and detected tags."""

    hed: HedEntry
    data: bytes
    file_type: FileType
    metadata: Dict[str, Metadata] = field(default_factory=dict)


def _read_at(stream: BinaryIO, position: int, size: int, what: str) -> bytes:
    stream.seek(position)
    data = stream.read(size)
    if len(data) != size:
        raise AemtError(f"Failed to read {what}")
    return data


def _read_files(
    entries: Iterable[HedEntry], dat: BinaryIO, bns: BinaryIO
) -> Iterator[KidzFile]:
    dat_len = os.fstat(dat.fileno()).st_size

    for index, entry in enumerate(entries):
        if entry.length == 0:
            yield KidzFile(entry, b"", FileType.EMPTY)
            continue

        size = entry.length * SECTOR_SIZE
        position = entry.offset * SECTOR_SIZE

        if index >= STR_FIRST_INDEX:
            # STR entries live outside the archive; only their slot is tracked.
            yield KidzFile(entry, bytes(size), FileType.STR)
        elif position < dat_len:
            yield KidzFile(entry, _read_at(dat, position, size, "DAT"), FileType.DAT)
        else:
            data = _read_at(bns, position - dat_len, size, "BNS")
            yield KidzFile(entry, data, FileType.BNS)


class Kidz:
    """The whole archive held in memory."""

    def __init__(self, files: List[KidzFile]) -> None:
        self.files = files

    @classmethod
    def load(cls, directory: PathLike) -> "Kidz":
        """Read the HED, DAT and BNS files found in ``directory``."""
        directory = Path(directory)
        with open(directory / HED_NAME, "rb") as hed, open(
            directory / DAT_NAME, "rb"
        ) as dat, open(directory / BNS_NAME, "rb") as bns:
            table = hed.read(HED_SIZE)
            if len(table) != HED_SIZE:
                raise AemtError("Failed to read the HED file")
            entries = [HedEntry.from_int(value) for (value,) in _HED_STRUCT.iter_unpack(table)]
            files = list(_read_files(entries, dat, bns))

        registry = MetadataRegistry()
        for index, kfile in enumerate(files):
            kfile.metadata.update(registry.scan(index, kfile.data))

        return cls(files)

    def archive_len(self, file_type: FileType, dat_len: int) -> int:
        """Byte length of the DAT or BNS part, judged by its last entry."""
        last: Optional[KidzFile] = None
        for kfile in self.files:
            if kfile.file_type is file_type and (
                last is None or kfile.hed.offset >= last.hed.offset
            ):
                last = kfile

        if last is None:
            raise AemtError(f"No {file_type} entries in the archive")

        end = (last.hed.offset + last.hed.length) * SECTOR_SIZE
        return end - dat_len if file_type is FileType.BNS else end

    def get(self, index: int) -> KidzFile:
        """Return the entry at ``index``."""
        if not 0 <= index < len(self.files):
            raise OutOfBoundsError()
        return self.files[index]

    def hedit(self, index: int, offset: int, length: int) -> None:
        """Overwrite the raw HED offset and length of one entry."""
        kfile = self.get(index)
        kfile.hed = HedEntry(offset=offset, length=length)

    def swap(self, index_a: int, index_b: int) -> None:
        """Exchange the contents and HED slots of two entries."""
        data_a = self.get(index_a).data
        data_b = self.get(index_b).data

        self.patch(index_a, data_b)
        self.patch(index_b, data_a)

        file_a, file_b = self.files[index_a], self.files[index_b]
        file_a.hed, file_b.hed = file_b.hed, file_a.hed

    def patch(self, index: int, data: bytes) -> None:
        """Replace an entry's contents, moving the entries stored after it."""
        data = bytes(data)
        if len(data) % SECTOR_SIZE:
            raise InvalidLengthError("Length must be a multiple of 2048")
        sectors = len(data) // SECTOR_SIZE
        if sectors > MAX_SECTORS:
            raise InvalidLengthError(
                "File is too big. Maximum allowed size is 8386560 bytes"
            )

        target = self.get(index)
        hed = target.hed
        delta = sectors - hed.length
        if delta:
            for kfile in self.files:
                if kfile.hed.offset > hed.offset:
                    kfile.hed = replace(kfile.hed, offset=kfile.hed.offset + delta)

        target.data = data
        target.hed = replace(target.hed, length=sectors)

    def store(self, directory: PathLike) -> None:
        """Write the HED, DAT and BNS files into ``directory``."""
        directory = Path(directory)
        dat_len = self.archive_len(FileType.DAT, 0)
        bns_len = self.archive_len(FileType.BNS, dat_len)

        with open(directory / HED_NAME, "wb") as hed, open(
            directory / DAT_NAME, "wb"
        ) as dat, open(directory / BNS_NAME, "wb") as bns:
            dat.truncate(dat_len)
            bns.truncate(bns_len)

            for kfile in self.files:
                hed.write(kfile.hed.to_bytes())
                position = kfile.hed.offset * SECTOR_SIZE
                if kfile.file_type is FileType.DAT:
                    dat.seek(position)
                    dat.write(kfile.data)
                elif kfile.file_type is FileType.BNS:
                    bns.seek(position - dat_len)
                    bns.write(kfile.data)