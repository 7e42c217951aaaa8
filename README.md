# backuptool

A Python library for writing deduplicating backup archives. Each file's
content is stored once under its SHA-256 digest, so identical files are kept
only once. Every backup run writes a new *revision* into a named *channel*.
A revision is a plain-text manifest that ends in its own checksum.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Archive layout

```
<archive>/
    settings.json        compression and hash settings
    lock                 present while a session holds the archive
    content/<sha256>     file contents
    channels/<name>/<revision>
```

Revision files are named from the UTC time plus a random 64-bit hex suffix
(see `backuptool.archive.defs.next_channel_file`).
`backuptool.archive.defs.channel_rev_last` returns the newest revision of a
channel, and `channel_rev_paths`, `channel_paths` and `content_paths` list
the archive's files.

## Creating an archive and backing up a directory

```python
from pathlib import Path

from backuptool.archive.channel_writer import ChannelWriter
from backuptool.archive.content import CompressionKind, ContentCompression, ContentSettings
from backuptool.archive.session import BackupSession
from backuptool.checksum import HashAlgo, new_hasher
from backuptool.dirwalk import walk_recursive
from backuptool.helpers import CopyAction, copy_convert, relative_path

settings = ContentSettings(ContentCompression(CompressionKind.BZIP2, 1), HashAlgo.SHA256)
BackupSession.init_archive("backups", settings)   # the path must not exist yet

source = Path("documents")
with ChannelWriter(BackupSession("backups"), "main") as writer:
    hasher = new_hasher(writer.session.settings.hash_algo)
    for path in walk_recursive(source):
        if path.is_file():
            digest = hasher.file(path)
            result = writer.add_file(relative_path(source, path), digest)
            if not result.already_exists:
                copy_convert(path, result.content_path, CopyAction.COMPRESS)
        elif path.is_dir():
            writer.add_dir(path)
```

`BackupSession` checks the archive's directories, reads `settings.json` and
creates the `lock` file; it raises `ArchiveError` if any of that fails,
including when the archive is already locked. Closing the session removes the
lock. A `ChannelWriter` takes over the session: closing the writer appends the
manifest's checksum line and closes the session. If the lock file is left
behind, delete it by hand before opening the archive again.

`ChannelWriter.add_file` only records the file and tells you where its
content belongs (`AddFileResult.content_path`) and whether it is stored
already (`AddFileResult.already_exists`); copying the content is up to the
caller. `copy_convert` always compresses with bzip2 at level 9.

## Manifests

`backuptool.meta_format.Writer` writes tab-indented `key:value` lines and, on
close, an `__end:<sha256>` line. `Reader` iterates the entries as
`ReaderEntry(key, value, depth)` and raises `MetaFormatError` on malformed
lines; `verify` checks the trailing checksum:

```python
from backuptool.archive import defs
from backuptool.meta_format import Reader, verify

revision = defs.channel_rev_last("backups", "main")
with open(revision, "rb") as handle:
    verify(handle)
with open(revision, "rb") as handle:
    for entry in Reader(handle):
        print(entry.depth, entry.key, entry.value)
```

## Other pieces

- `backuptool.checksum`: `Hasher`, `new_hasher`, `HashResult` with `hex()`
  and `short()`.
- `backuptool.dirwalk.DirWalk`: sorted, depth-first walk with an optional
  path filter.
- `backuptool.archive.content`: `ContentWriter` and `ContentReader` wrap a
  binary stream in the compression named by `ContentSettings`.
- `backuptool.helpers.format_error_chain` renders an exception with its
  causes.

## What this package does not do

There is no command-line program; everything is used from Python. There is
also no ready-made restore: the package gives no function that reads a
revision back into a directory. The pieces for one are here (`Reader`,
`defs.content_file`, `HashResult.from_hex_string` and
`copy_convert(..., CopyAction.UNCOMPRESS)`), but putting them together is
left to the caller.