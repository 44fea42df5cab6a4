import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd

from errors import InvalidOptions, NoFileSelected

DELIMITER_ALIASES = {
    "comma": ",",
    "semicolon": ";",
    "tab": "\t",
    "\\t": "\t",
}
ALLOWED_DELIMITERS = {",", ";", "\t"}

TRUE_VALUES = {"1", "true", "yes", "on", "y", "t"}
FALSE_VALUES = {"0", "false", "no", "off", "n", "f"}


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


def _parse_bool(value, default):
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise InvalidOptions(f"Invalid value for has_header: {value!r}")


@dataclass(frozen=True)
class LoadOptions:
    """User choices that control how an uploaded file is parsed"""

    has_header: bool = True
    delimiter: str = ","
    sheet_name: Optional[str] = None

    def __post_init__(self):
        if self.delimiter not in ALLOWED_DELIMITERS:
            raise InvalidOptions(
                f"Invalid delimiter {self.delimiter!r}. Choose comma, semicolon or tab."
            )

    @classmethod
    def from_form(cls, form, base=None):
        """Build options from request form/JSON values, falling back to ``base``"""
        base = base or cls()
        delimiter = form.get("delimiter")
        if delimiter is None or delimiter == "":
            delimiter = base.delimiter
        else:
            delimiter = DELIMITER_ALIASES.get(str(delimiter).lower(), delimiter)

        sheet_name = form.get("sheet_name", base.sheet_name)
        if sheet_name == "":
            sheet_name = None

        return cls(
            has_header=_parse_bool(form.get("has_header"), base.has_header),
            delimiter=delimiter,
            sheet_name=sheet_name,
        )

    def to_dict(self):
        return {
            "has_header": self.has_header,
            "delimiter": self.delimiter,
            "sheet_name": self.sheet_name,
        }


@dataclass(frozen=True, eq=False)
class Table:
    """Loaded dataset: a DataFrame plus the kind of each column"""

    frame: pd.DataFrame
    column_kinds: Dict[str, ColumnKind]
    source_name: str = ""

    @property
    def row_count(self):
        return len(self.frame)

    @property
    def column_count(self):
        return len(self.frame.columns)

    @property
    def columns(self) -> List[str]:
        return [str(col) for col in self.frame.columns]

    def kind(self, column):
        return self.column_kinds[column]

    @property
    def numeric_columns(self):
        return [col for col in self.columns if self.column_kinds[col] is ColumnKind.NUMERIC]

    @property
    def categorical_columns(self):
        return [col for col in self.columns if self.column_kinds[col] is ColumnKind.CATEGORICAL]


@dataclass
class DatasetSession:
    """One upload: the raw file, its load options and the table built from it"""

    id: str
    filename: str
    file_type: str
    content: bytes = field(repr=False)
    options: LoadOptions = field(default_factory=LoadOptions)
    sheet_names: List[str] = field(default_factory=list)
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _table: Optional[Table] = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def file_size(self):
        return len(self.content)

    def table(self, loader):
        """Return the table, parsing the upload on first use"""
        with self._lock:
            if self._table is None:
                self._table = loader.load(
                    self.content, self.file_type, self.options, source_name=self.filename
                )
            return self._table

    def set_options(self, options):
        with self._lock:
            self.options = options
            self._table = None

    def to_dict(self):
        return {
            "dataset_id": self.id,
            "file_name": self.filename,
            "file_type": self.file_type,
            "file_size": self.file_size,
            "sheet_names": list(self.sheet_names),
            "options": self.options.to_dict(),
            "uploaded_at": self.uploaded_at.isoformat(),
        }


class DatasetStore:
    """Process-local registry of uploads keyed by a random id.

    With ``max_datasets`` set, adding an upload beyond the cap evicts the
    oldest ones.
    """

    def __init__(self, max_datasets=None):
        self.max_datasets = max_datasets
        self._sessions = {}
        self._lock = threading.Lock()

    def create(self, filename, file_type, content, options=None, sheet_names=None):
        session = DatasetSession(
            id=uuid.uuid4().hex,
            filename=filename,
            file_type=file_type,
            content=content,
            options=options or LoadOptions(),
            sheet_names=list(sheet_names or []),
        )
        with self._lock:
            self._sessions[session.id] = session
            # dicts keep insertion order, so the first key is the oldest upload
            while self.max_datasets and len(self._sessions) > self.max_datasets:
                oldest = next(iter(self._sessions))
                evicted = self._sessions.pop(oldest)
                logging.info(f"Evicted dataset {oldest} ('{evicted.filename}'): store holds {self.max_datasets} uploads at most")
        return session

    def get(self, dataset_id):
        with self._lock:
            session = self._sessions.get(dataset_id)
        if session is None:
            raise NoFileSelected()
        return session

    def delete(self, dataset_id):
        with self._lock:
            return self._sessions.pop(dataset_id, None) is not None

    def update_options(self, dataset_id, form):
        session = self.get(dataset_id)
        session.set_options(LoadOptions.from_form(form, base=session.options))
        return session

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, dataset_id):
        with self._lock:
            return dataset_id in self._sessions


@dataclass
class PlotResult:
    """A rendered PNG, or the message shown instead of a plot"""

    image: Optional[bytes] = field(default=None, repr=False)
    message: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_plot(self):
        return self.image is not None
