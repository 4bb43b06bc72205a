# aemt

A command-line tool and library for the `KKIIDDZZ` archive trio
(`KKIIDDZZ.HED`, `KKIIDDZZ.DAT`, `KKIIDDZZ.BNS`). It lists the files stored
in the archive, extracts them, replaces them, swaps them, edits header
entries directly and pulls individual PS-ADPCM tracks out of sound packs.

## Installation

```
pip install .
```

## Command line

Every command takes the directory holding the three `KKIIDDZZ.*` files
first, then a subcommand:

```
aemt <directory> <command> [arguments]
```

Indexes start from 0. On failure (a bad index, a bad length, an unreadable
file) the command prints `Error: ...` to standard error and exits with
status 1.

### list

```
aemt game/ list
aemt game/ list --decimal
aemt game/ list --true-bns
```

Prints index, type (`DAT`, `BNS` or `STR`), offset and length (both in
2048-byte sectors) and the detected metadata of every non-empty entry.
Values are eight-digit hexadecimal unless `--decimal` is given. BNS offsets
are shown relative to the start of the BNS file unless `--true-bns` is
given, in which case they are counted from the start of the DAT file.

Metadata tags are `Sound Pack` (entry 10), `Sound Pack Pointers`
(entry 11), `SShd` (the entry contains an `SShd` marker), `ADPCM` (the
entry appears to hold ADPCM tracks) and `STR Pointer: <name>` for the
known STR slots 448 to 467.

### extract

```
aemt game/ extract 10 sounds.bin
```

Writes the contents of the entry at the given index to the output path.
STR entries are not read from disk, so extracting one gives zero bytes of
the entry's length.

### patch

```
aemt game/ patch 10 sounds.bin
```

Replaces the entry at the given index with the input file and writes the
archive back. The input length must be a multiple of 2048 bytes and at most
4095 sectors (8386560 bytes). Entries stored after it are moved by the
difference in size.

### swap

```
aemt game/ swap 3 4
```

Swaps the contents and header slots of two entries and writes the archive
back. Mostly useful for testing how the game reacts to rearranged data.

### hedit

```
aemt game/ hedit 450 0x1A2B0 0x40
```

Sets the raw offset and length of a header entry and writes the archive
back. Numbers may be decimal or `0x`-prefixed hexadecimal; the offset must
fit in 32 bits and the length in 16 bits. This is meant mainly for STR
entries; careless edits can break the whole archive.

### extract-audio

```
aemt game/ extract-audio 10 0 track0.adpcm
```

Splits the entry at the given index into tracks and writes the chosen track
as raw PS-ADPCM, ready for a player such as vgmstream with a matching txth
description.

## Library use

```python
from aemt.archive import Kidz, FileType
from aemt.audio import AdpcmState, decode_adpcm, split_audio_pack

kidz = Kidz.load("game")
pack = kidz.get(10)
print(pack.file_type, pack.hed.offset, pack.hed.length, list(pack.metadata))

tracks = split_audio_pack(pack.data)
state = AdpcmState()
track = tracks[0]
samples = []
for start in range(0, len(track) - 15, 16):
    samples.extend(decode_adpcm(state, track[start:start + 16]))

kidz.patch(10, pack.data)
kidz.store("game")
```

- `aemt.archive`: `Kidz` (`load`, `get`, `patch`, `swap`, `hedit`,
  `archive_len`, `store`), `KidzFile`, `HedEntry` (`from_int`,
  `from_bytes`, `to_int`, `to_bytes`) and `FileType`.
- `aemt.audio`: `decode_adpcm` turns one 16-byte frame into 28 signed
  16-bit samples, `split_audio_pack` cuts a sound pack into tracks.
- `aemt.metadata`: the scanners and `MetadataRegistry` that tag entries.
- `aemt.hexnum`: `parse_hex_u16` and `parse_hex_u32`.

Errors raised by the package derive from `aemt.errors.AemtError`
(`InvalidLengthError`, `InvalidNumberError`, `OutOfBoundsError`); file
access problems surface as `OSError`.

## What it does not do

There is no command that plays audio. Tracks can be extracted to files, and
`decode_adpcm` yields PCM samples (mono, 18000 Hz in the game's sound
packs), but sending them to a sound device is left to other software.

## Running the tests

```
pip install .[test]
pytest
```