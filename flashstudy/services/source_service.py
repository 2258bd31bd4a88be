# flashstudy/services/source_service.py
import asyncio
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from flashstudy.core.log_manager import logger
from flashstudy.exceptions import NoInputFiles, ReadFailure

CSV_SUFFIX = ".csv"
ENCODING = "utf-8-sig"  # tolerate the BOM spreadsheet exports prepend


def is_csv_name(name: str) -> bool:
    return name.lower().endswith(CSV_SUFFIX)


class TextSource(Protocol):
    """
    Yields (path, raw text) for each selected entry. Paths are
    forward-slash delimited and already restricted to .csv names.
    """

    def list_paths(self) -> List[str]:
        ...

    async def read_text(self, path: str) -> str:
        ...


class MemorySource:
    """Documents already in memory, e.g. browser uploads. Values may be bytes."""

    def __init__(self, documents: Mapping[str, Union[str, bytes]]):
        self._documents = {
            path.replace("\\", "/"): content
            for path, content in documents.items()
            if is_csv_name(path)
        }

    def list_paths(self) -> List[str]:
        return list(self._documents)

    async def read_text(self, path: str) -> str:
        content = self._documents[path]
        if isinstance(content, bytes):
            return content.decode(ENCODING)
        return content


class FolderSource:
    """
    Every .csv file below `root`, addressed by its folder-relative path.
    """

    def __init__(self, root: Union[str, Path]):
        # Path("") would silently mean the working directory
        self.root: Optional[Path] = Path(root) if str(root).strip() else None

    def list_paths(self) -> List[str]:
        if self.root is None or not self.root.is_dir():
            return []
        return [
            p.relative_to(self.root).as_posix()
            for p in self.root.rglob("*")
            if p.is_file() and is_csv_name(p.name)
        ]

    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread((self.root / path).read_text, encoding=ENCODING)


class FileSource:
    """Individually picked files, addressed by their bare file name."""

    def __init__(self, files: Sequence[Union[str, Path]]):
        self._files: Dict[str, Path] = {
            Path(f).name: Path(f) for f in files if is_csv_name(Path(f).name)
        }

    def list_paths(self) -> List[str]:
        return list(self._files)

    async def read_text(self, path: str) -> str:
        return await asyncio.to_thread(self._files[path].read_text, encoding=ENCODING)


async def read_documents(source: TextSource) -> List[Tuple[str, str]]:
    """
    Reads every entry of `source` concurrently and joins the results.
    Either every read succeeds or the whole batch fails with one
    ReadFailure listing each failed path; partial batches are never returned.
    """
    # Listing a folder walks the disk, keep it off the event loop
    paths = await asyncio.to_thread(source.list_paths)
    if not paths:
        raise NoInputFiles()

    results = await asyncio.gather(
        *(source.read_text(path) for path in paths),
        return_exceptions=True,
    )

    failures: Dict[str, str] = {}
    documents: List[Tuple[str, str]] = []
    for path, result in zip(paths, results):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        if isinstance(result, Exception):
            failures[path] = f"{type(result).__name__}: {result}"
        else:
            documents.append((path, result))

    if failures:
        logger.error(f"Aborting batch of {len(paths)} file(s); failed reads: {failures}")
        raise ReadFailure(failures)

    logger.info(f"Read {len(documents)} document(s).")
    return documents
