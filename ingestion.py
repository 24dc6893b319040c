import os
import csv
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import pandas as pd
from tqdm import tqdm

from avl_dictionary import OrderedFrequencyDictionary
from utils import tokenize

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = ('.xlsx', '.xlsm')


class IngestionRecordError(Exception):
    """A single source record that cannot be turned into field strings."""

    def __init__(self, path: str, record_number: int, reason: str):
        super().__init__(f"{path}, record {record_number}: {reason}")
        self.path = path
        self.record_number = record_number
        self.reason = reason


@dataclass(frozen=True)
class SourceLayout:
    """
    Where the text lives in one kind of tabular source.

    Attributes:
        name (str): Label used in logs and build reports.
        filename (str): File name looked up inside the data directory.
        kind (str): "csv" or "excel".
        columns (Optional[Tuple[int, ...]]): Zero-based column indexes to read.
            None means every cell of the row. Indexes past the end of a row
            are ignored.
        min_columns (int): Rows with fewer cells than this are malformed.
        has_header (bool): Whether the first row is a header to skip.
    """
    name: str
    filename: str
    kind: str = "csv"
    columns: Optional[Tuple[int, ...]] = None
    min_columns: int = 0
    has_header: bool = True


DEFAULT_LAYOUTS: Tuple[SourceLayout, ...] = (
    SourceLayout("remax", "remax_listings.csv", columns=(1, 2), min_columns=3),
    SourceLayout("combined", "combined_scraped_data.csv"),
    SourceLayout("scraped", "scraped_data.csv", columns=(1, 2, 3, 4), min_columns=5),
    SourceLayout("scraped_excel", "ScrapedData.xlsx", kind="excel", columns=(0,), min_columns=1),
    SourceLayout("zolo_windsor", "zolo_windsor_listings.csv", columns=tuple(range(4, 10))),
)


def layout_for_path(path: str) -> SourceLayout:
    """A layout that reads every cell of an arbitrary file, kind chosen by extension."""
    filename = os.path.basename(path)
    kind = "excel" if filename.lower().endswith(EXCEL_EXTENSIONS) else "csv"
    return SourceLayout(name=os.path.splitext(filename)[0], filename=filename, kind=kind)


class RawRecord(NamedTuple):
    number: int
    cells: Optional[List[str]]
    problem: Optional[str] = None


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return ""
    return str(value)


def _read_csv(path: str) -> Iterator[RawRecord]:
    # undecodable bytes become U+FFFD, which the tokenizer splits on
    with open(path, 'r', encoding='utf-8', errors='replace', newline='') as handle:
        reader = csv.reader(handle)
        number = 0
        while True:
            number += 1
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                yield RawRecord(number, None, str(e))
                continue
            yield RawRecord(number, row)


def _read_excel(path: str) -> Iterator[RawRecord]:
    # first sheet only; every cell as a Python object, empty cells as NaN
    frame = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    for number, values in enumerate(frame.itertuples(index=False, name=None), start=1):
        yield RawRecord(number, [_cell_text(value) for value in values])


def read_rows(path: str, kind: str) -> Iterator[RawRecord]:
    """
    Reads a tabular file into raw records of cell strings.

    Args:
        path (str): File to read.
        kind (str): "csv" for delimited text, "excel" for a workbook.

    Raises:
        ValueError: If `kind` is not recognised.
    """
    if kind == "csv":
        return _read_csv(path)
    if kind == "excel":
        return _read_excel(path)
    raise ValueError(f"Unknown source kind: {kind!r}")


def extract_fields(record: RawRecord, layout: SourceLayout, path: str) -> List[str]:
    """
    Picks the layout's text fields out of one record.

    Raises:
        IngestionRecordError: If the record could not be parsed, is shorter
            than the layout requires, or has no text in any selected column.
    """
    if record.cells is None:
        raise IngestionRecordError(path, record.number, record.problem or "unparseable record")

    cells = record.cells
    if len(cells) < layout.min_columns:
        raise IngestionRecordError(
            path, record.number,
            f"expected at least {layout.min_columns} cells, found {len(cells)}"
        )

    if layout.columns is None:
        return list(cells)

    fields = [cells[i] for i in layout.columns if i < len(cells)]
    if not any(f and f.strip() for f in fields):
        raise IngestionRecordError(path, record.number, "no text in the selected columns")
    return fields


@dataclass
class BuildReport:
    """Outcome of a vocabulary build."""
    words_by_source: Dict[str, int] = field(default_factory=dict)
    skipped_records: int = 0
    failed_sources: List[str] = field(default_factory=list)

    @property
    def total_words(self) -> int:
        return sum(self.words_by_source.values())


class VocabularyBuilder:
    """
    Fills an OrderedFrequencyDictionary from free text and tabular sources.

    Malformed records are logged and skipped, and unreadable files are logged
    and skipped whole, so one bad input never stops the rest of the build.
    """

    def __init__(self, dictionary: Optional[OrderedFrequencyDictionary] = None,
                 show_progress: bool = True) -> None:
        self.dictionary: OrderedFrequencyDictionary = (
            dictionary if dictionary is not None else OrderedFrequencyDictionary()
        )
        self.show_progress = show_progress
        self.report = BuildReport()

    def add_text(self, text) -> int:
        """Tokenizes `text` and inserts every word. Returns the number inserted."""
        words = tokenize(text)
        for word in words:
            self.dictionary.insert(word)
        return len(words)

    def add_source(self, path: str, layout: Optional[SourceLayout] = None) -> int:
        """
        Ingests one tabular file.

        Args:
            path (str): The file to read.
            layout (Optional[SourceLayout]): How to read it. Defaults to every
                cell, with the kind chosen by file extension.

        Returns:
            int: Number of words inserted from this file (0 if it was unreadable).
        """
        if layout is None:
            layout = layout_for_path(path)

        inserted = 0
        skipped = 0
        try:
            records = read_rows(path, layout.kind)
            for record in tqdm(records, desc=f"Reading {layout.name}", unit=" rows",
                               disable=not self.show_progress, leave=False):
                if layout.has_header and record.number == 1:
                    continue
                if record.cells is not None and not record.cells:
                    continue  # blank line

                try:
                    fields = extract_fields(record, layout, path)
                except IngestionRecordError as e:
                    logger.warning(f"Skipping record: {e}")
                    skipped += 1
                    continue

                inserted += self.add_text(" ".join(fields))
        except (OSError, ValueError) as e:
            logger.error(f"Could not read source '{layout.name}' from {path}: {e}")
            self.report.failed_sources.append(layout.name)
        except Exception as e:
            logger.error(f"Unexpected error while reading source '{layout.name}' from {path}: {e}",
                         exc_info=True)
            self.report.failed_sources.append(layout.name)
        else:
            logger.info(f"Source '{layout.name}': {inserted} words inserted, {skipped} records skipped.")

        self.report.skipped_records += skipped
        self.report.words_by_source[layout.name] = self.report.words_by_source.get(layout.name, 0) + inserted
        return inserted

    def build(self, data_dir: str, layouts: Sequence[SourceLayout] = DEFAULT_LAYOUTS) -> BuildReport:
        """
        Ingests every layout's file from `data_dir`.

        Missing files are reported and skipped.

        Returns:
            BuildReport: Per-source word counts, skipped records and failed sources.
        """
        logger.info(f"Building vocabulary from {len(layouts)} source(s) in '{data_dir}'...")
        for layout in layouts:
            path = os.path.join(data_dir, layout.filename)
            if not os.path.isfile(path):
                logger.warning(f"Source file not found for '{layout.name}': {path}. Skipping.")
                self.report.failed_sources.append(layout.name)
                continue
            self.add_source(path, layout)

        logger.info(
            f"Vocabulary build complete: {len(self.dictionary)} distinct words, "
            f"{self.report.total_words} total, {self.report.skipped_records} records skipped."
        )
        return self.report


def merge_dictionaries(dictionaries: Iterable[OrderedFrequencyDictionary]) -> OrderedFrequencyDictionary:
    """
    Combines independently built dictionaries into a new one, summing frequencies.

    Run before any queries, from a single thread.
    """
    merged = OrderedFrequencyDictionary()
    for dictionary in dictionaries:
        merged.merge(dictionary)
    return merged
