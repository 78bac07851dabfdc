"""Loader for the UCI letter-recognition file format.

Each line holds an uppercase letter followed by sixteen integer attributes in
``[0, 15]``::

    T,2,8,3,5,1,8,13,0,6,6,10,8,0,8,0,8

Attributes are scaled by ``1 / 15`` and letters become one-hot vectors over
``A``-``Z``. Blank lines are skipped; errors still report the line number
within the file.
"""

from __future__ import annotations

import string
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from ..core.errors import DatasetParseError
from ..core.types import TrainingExample
from .registry import DataSpec, DatasetSpec, register_dataset
from .utils import examples_from_arrays, fraction_split, one_hot

FIXTURE_DIR = Path(__file__).resolve().parent / "_fixtures"
DEFAULT_PATH = FIXTURE_DIR / "letters_fixture.data"

LETTERS = tuple(string.ascii_uppercase)
N_ATTRIBUTES = 16
ATTRIBUTE_SCALE = 15.0

_ENCODER = LabelEncoder().fit(LETTERS)


def letter_index(label: str) -> int:
    """Map ``"A"``..``"Z"`` to ``0``..``25``."""

    key = str(label).strip()
    if len(key) != 1 or key not in LETTERS:
        raise DatasetParseError(f"unknown label {label!r}; expected one of A-Z")
    return int(_ENCODER.transform([key])[0])


def encode_letter(label: str) -> np.ndarray:
    """One-hot target vector for ``label``."""

    return one_hot(letter_index(label), len(LETTERS))


def _data_lines(path: Path) -> List[int]:
    """1-based file line numbers of the non-blank lines, in order."""

    with path.open(encoding="utf-8", errors="replace") as handle:
        return [number for number, text in enumerate(handle, start=1) if text.strip()]


class _Rows:
    """Translate frame row positions into file line numbers."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.lines = _data_lines(path)

    def error(self, message: str, row: int) -> DatasetParseError:
        line = self.lines[row] if row < len(self.lines) else row + 1
        return DatasetParseError(message, path=str(self.path), line=line)


def _read_frame(path: Path, limit: int | None) -> pd.DataFrame:
    try:
        frame = pd.read_csv(
            path,
            header=None,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
            nrows=limit,
        )
    except FileNotFoundError as exc:
        raise DatasetParseError("file not found", path=str(path)) from exc
    except pd.errors.EmptyDataError as exc:
        raise DatasetParseError("file is empty", path=str(path)) from exc
    except pd.errors.ParserError as exc:
        raise DatasetParseError(f"malformed line ({exc})", path=str(path)) from exc
    return frame


def _check_shape(frame: pd.DataFrame, rows: _Rows) -> None:
    expected = N_ATTRIBUTES + 1
    if frame.shape[1] != expected:
        raise rows.error(f"expected {expected} fields per line, found {frame.shape[1]}", 0)
    short = frame.isna().any(axis=1).to_numpy()
    if short.any():
        raise rows.error(f"expected {expected} fields per line", int(np.flatnonzero(short)[0]))


def _parse_attributes(frame: pd.DataFrame, rows: _Rows) -> np.ndarray:
    raw = frame.iloc[:, 1:]
    values = raw.apply(pd.to_numeric, errors="coerce")
    bad = values.isna().any(axis=1).to_numpy()
    if bad.any():
        row = int(np.flatnonzero(bad)[0])
        fields = ",".join(str(value) for value in raw.iloc[row].tolist())
        raise rows.error(f"unparsable numeric field in {fields!r}", row)
    return values.to_numpy(dtype=np.float64) / ATTRIBUTE_SCALE


def _parse_labels(frame: pd.DataFrame, rows: _Rows) -> np.ndarray:
    labels = frame.iloc[:, 0].str.strip()
    valid = labels.isin(LETTERS).to_numpy()
    if not valid.all():
        row = int(np.flatnonzero(~valid)[0])
        raise rows.error(f"unknown label {labels.iloc[row]!r}; expected one of A-Z", row)
    indices = _ENCODER.transform(labels.to_numpy())
    return np.eye(len(LETTERS), dtype=np.float64)[indices]


def load_examples(path: str | Path, *, limit: int | None = None) -> Tuple[TrainingExample, ...]:
    """Parse ``path`` into training examples, raising :class:`DatasetParseError`."""

    path = Path(path)
    frame = _read_frame(path, limit)
    rows = _Rows(path)
    _check_shape(frame, rows)
    inputs = _parse_attributes(frame, rows)
    targets = _parse_labels(frame, rows)
    return examples_from_arrays(inputs, targets)


@register_dataset("letters")
def load_letters(
    *,
    path: str | Path | None = None,
    train_fraction: float = 0.8,
    limit: int | None = None,
    **_: object,
) -> DatasetSpec:
    """Letter recognition split in file order into train and test sets."""

    source = Path(path) if path else DEFAULT_PATH
    examples = load_examples(source, limit=limit)
    try:
        train, test = fraction_split(examples, train_fraction)
    except ValueError as exc:
        raise DatasetParseError(
            f"cannot split {len(examples)} rows: {exc}", path=str(source)
        ) from exc
    return DatasetSpec(
        name="letters",
        train=train,
        test=test,
        data_spec=DataSpec(
            d_in=N_ATTRIBUTES,
            d_out=len(LETTERS),
            task_type="multiclass",
            num_classes=len(LETTERS),
        ),
        provenance={
            "path": str(source),
            "rows": len(examples),
            "train_fraction": train_fraction,
            "attribute_scale": ATTRIBUTE_SCALE,
        },
    )


__all__ = [
    "LETTERS",
    "N_ATTRIBUTES",
    "ATTRIBUTE_SCALE",
    "encode_letter",
    "letter_index",
    "load_examples",
    "load_letters",
]
