import logging
from typing import Dict, Iterable, List, Optional

from .classify import Classification, LineKind, classify_line
from .models import ConfigKeyValues, ShellConfig
from .sources import read_optional_source
from .vfs import PathLike, VirtualFileSystem

logger = logging.getLogger(__name__)


def insert_value(mapping: ConfigKeyValues, key: str, value: str) -> None:
    mapping.setdefault(key, set()).add(value)


class ConfigMerger:
    """Folds assignments from several rc files into one per-key value set.

    A key may legitimately carry different values in competing files, so every
    distinct value is kept. Feeding the same content twice changes nothing.
    """

    def __init__(self):
        self.aliases: ConfigKeyValues = {}
        self.exports: ConfigKeyValues = {}
        self.variables: ConfigKeyValues = {}
        self.sources: List[str] = []
        self._targets: Dict[LineKind, ConfigKeyValues] = {
            LineKind.ALIAS: self.aliases,
            LineKind.EXPORT: self.exports,
            LineKind.VARIABLE: self.variables,
        }

    def fold(self, classification: Classification) -> None:
        insert_value(self._targets[classification.kind], classification.key, classification.value)

    def feed_text(self, text: str) -> None:
        for line in text.splitlines():
            classification = classify_line(line)
            if classification is not None:
                self.fold(classification)

    def feed_file(self, vfs: VirtualFileSystem, path: PathLike) -> bool:
        contents = read_optional_source(vfs, path)
        if contents is None:
            return False
        self.feed_text(contents)
        self.sources.append(str(path))
        return True

    def result(self) -> ShellConfig:
        return ShellConfig(
            aliases={k: set(v) for k, v in self.aliases.items()},
            exports={k: set(v) for k, v in self.exports.items()},
            variables={k: set(v) for k, v in self.variables.items()},
            sources=list(self.sources),
        )


def merge_files(
    vfs: VirtualFileSystem,
    paths: Iterable[PathLike],
    merger: Optional[ConfigMerger] = None,
) -> ShellConfig:
    merger = merger or ConfigMerger()
    for path in paths:
        merger.feed_file(vfs, path)
    logger.debug(f"Merged shell config from {len(merger.sources)} file(s): {merger.sources}")
    return merger.result()
