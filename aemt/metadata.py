"""Heuristic scanners that tag archive entries with what they contain."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple

from aemt.audio import BOTTOM_DELIMITER, UPPER_DELIMITER


class MetadataKind(Enum):
    SOUND_PACK = "Sound Pack"
    SOUND_PACK_PTR = "Sound Pack Pointers"
    SSHD = "SShd"
    ADPCM = "ADPCM"
    STR = "STR Pointer"


@dataclass(frozen=True)
class Metadata:
    """A tag attached to an archive entry."""

    kind: MetadataKind
    name: str = ""

    def __str__(self) -> str:
        if self.kind is MetadataKind.STR:
            return f"{self.kind.value}: {self.name}"
        return self.kind.value


Scanner = Callable[[int, bytes], Dict[str, Metadata]]

SOUND_PACK_INDEX = 10
SOUND_PACK_PTR_INDEX = 11

STR_NAMES = {
    448: "LAB.STR",
    449: "WEPGET.STR",
    450: "GOV1.STR",
    451: "GOV2.STR",
    452: "STEXP.STR",
    453: "TALK.STR",
    454: "BUILDD1.STR",
    455: "BUILDD2.STR",
    456: "A_HA_D1.STR",
    457: "A_HA_D2.STR",
    458: "A_NA_D1.STR",
    459: "A_NA_D2.STR",
    460: "A_RAI_D1.STR",
    461: "A_RAI_D2.STR",
    462: "A_SPE_D1.STR",
    463: "SFIN_D1.STR",
    464: "SFIN_D2.STR",
    465: "SFIN_D3.STR",
    466: "CASTLE.STR",
    467: "FINAL_D1.STR",
}


def scan_sound_pack(index: int, data: bytes) -> Dict[str, Metadata]:
    """Tag the entry that holds the main sound pack."""
    if index == SOUND_PACK_INDEX:
        return {"type": Metadata(MetadataKind.SOUND_PACK)}
    return {}


def scan_sound_pack_ptr(index: int, data: bytes) -> Dict[str, Metadata]:
    """Tag the entry that holds the sound pack pointers."""
    if index == SOUND_PACK_PTR_INDEX:
        return {"type": Metadata(MetadataKind.SOUND_PACK_PTR)}
    return {}


def scan_sshd(index: int, data: bytes) -> Dict[str, Metadata]:
    """Tag entries containing an SShd header."""
    if b"SShd" in data:
        return {"SShd": Metadata(MetadataKind.SSHD)}
    return {}


def scan_adpcm(index: int, data: bytes) -> Dict[str, Metadata]:
    """Tag entries that appear to contain ADPCM tracks."""
    upper = data.find(UPPER_DELIMITER)
    if upper != -1 and data.find(BOTTOM_DELIMITER, upper + len(UPPER_DELIMITER)) != -1:
        return {"ADPCM": Metadata(MetadataKind.ADPCM)}
    return {}


def scan_str(index: int, data: bytes) -> Dict[str, Metadata]:
    """Tag the slots known to point at STR video files."""
    name = STR_NAMES.get(index)
    if name:
        return {"STR": Metadata(MetadataKind.STR, name)}
    return {}


class MetadataRegistry:
    """An ordered set of scanners whose results are merged."""

    def __init__(self) -> None:
        self._scanners: List[Tuple[str, Scanner]] = []
        self.register("sound_pack", scan_sound_pack)
        self.register("sound_pack_ptr", scan_sound_pack_ptr)
        self.register("SShd", scan_sshd)
        self.register("ADPCM", scan_adpcm)
        self.register("STR", scan_str)

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self._scanners]

    def register(self, name: str, scanner: Scanner) -> None:
        """Add a scanner; later scanners win on key collisions."""
        self._scanners.append((name, scanner))

    def scan(self, index: int, data: bytes) -> Dict[str, Metadata]:
        """Run every scanner over one entry and merge the tags."""
        found: Dict[str, Metadata] = {}
        for _, scanner in self._scanners:
            found.update(scanner(index, data))
        return found