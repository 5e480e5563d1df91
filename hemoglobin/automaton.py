"""Rule tables for two-state 3x3 cellular automata and their textual codes."""

import base64
import binascii
import logging
from typing import Optional, Sequence, Set, Tuple

import numpy as np

from .config import RULE_CODE_BYTES, TABLE_SIZE
from .errors import DecodeError
from .neighborhood import center_alive, live_neighbors

logger = logging.getLogger(__name__)

CODE_BITS = RULE_CODE_BYTES * 8


def bits_from_bytes(data: bytes) -> np.ndarray:
    """Unpack bytes in buffer order, most significant bit first within each byte."""
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8)).astype(bool)


def parse_life_like(rule_str: str) -> Tuple[Set[int], Set[int]]:
    """Parse birth/survival notation like 'B3/S23', 'B36/S125' or 'B3S23'."""
    rule_str = rule_str.upper().replace(" ", "")
    if not rule_str.startswith("B") or "S" not in rule_str:
        raise ValueError(f"Expected B/S notation like 'B3/S23', got '{rule_str}'")

    idx = rule_str.index("S")
    birth_part = rule_str[1:idx].rstrip("/")
    survival_part = rule_str[idx + 1:]
    counts = birth_part + survival_part
    if not all(c.isdigit() and c != "9" for c in counts):
        raise ValueError(f"Neighbor counts must be digits 0-8, got '{rule_str}'")

    birth = set(int(c) for c in birth_part)
    survival = set(int(c) for c in survival_part)
    return birth, survival


class Rule:
    """Next-state decision for each of the 512 neighbor-state codes.

    Rules are usually built from a base-64 code of RULE_CODE_BYTES bytes. The
    code's bits are read MSB-first in buffer order, reversed, and written to
    the low end of the table, so a code only ever reaches entries
    0..CODE_BITS-1; the remaining entries stay dead. Rules built directly from
    a table (for example from life-like notation) may use the full range, but
    only their low entries survive ``to_code``.
    """

    def __init__(self, table: Sequence[bool]):
        table = np.array(table, dtype=bool)
        if table.shape != (TABLE_SIZE,):
            raise ValueError(f"Rule table must have {TABLE_SIZE} entries, got shape {table.shape}")
        table.flags.writeable = False
        self._table = table

    @classmethod
    def from_code(cls, code: str) -> "Rule":
        """Decode a textual rule code (standard base-64 with padding).

        Whitespace anywhere in the code is ignored, so codes read from files
        or pasted with a trailing newline decode normally.
        """
        code = "".join(code.split())
        try:
            data = base64.b64decode(code, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Invalid rule code '{code}': {e}") from e

        if len(data) != RULE_CODE_BYTES:
            raise DecodeError(
                f"Rule code '{code}' decodes to {len(data)} bytes, expected {RULE_CODE_BYTES}"
            )
        if base64.b64encode(data).decode("ascii") != code:
            raise DecodeError(f"Rule code '{code}' is not canonically encoded")

        bits = bits_from_bytes(data)
        table = np.zeros(TABLE_SIZE, dtype=bool)
        table[:len(bits)] = bits[::-1]
        logger.debug("Decoded rule code %s: %d live entries", code, int(table.sum()))
        return cls(table)

    @classmethod
    def from_int(cls, value: int) -> "Rule":
        """Build a rule from an integer whose bit i is table entry i."""
        if not 0 <= value < (1 << TABLE_SIZE):
            raise ValueError(f"Rule integer must fit in {TABLE_SIZE} bits")
        return cls([(value >> i) & 1 for i in range(TABLE_SIZE)])

    @classmethod
    def from_life_like(cls, rule_str: str) -> "Rule":
        """Build the full table of an outer-totalistic rule, e.g. 'B3/S23' for Conway's Life."""
        birth, survival = parse_life_like(rule_str)
        table = []
        for state in range(TABLE_SIZE):
            count = live_neighbors(state)
            if center_alive(state):
                table.append(count in survival)
            else:
                table.append(count in birth)
        return cls(table)

    @classmethod
    def random(cls, rng: Optional[np.random.Generator] = None) -> "Rule":
        """Random rule over the entries reachable by a textual code."""
        if rng is None:
            rng = np.random.default_rng()
        return cls.from_code(base64.b64encode(rng.bytes(RULE_CODE_BYTES)).decode("ascii"))

    @property
    def table(self) -> np.ndarray:
        """Read-only boolean table."""
        return self._table

    def to_code(self) -> str:
        """Encode the low CODE_BITS entries back into a textual code."""
        if self._table[CODE_BITS:].any():
            logger.warning(
                "Rule has live entries above %d; they are not representable in a rule code",
                CODE_BITS - 1,
            )
        bits = self._table[:CODE_BITS][::-1]
        data = np.packbits(bits).tobytes()
        return base64.b64encode(data).decode("ascii")

    def to_int(self) -> int:
        return sum(1 << int(i) for i in np.flatnonzero(self._table))

    def lambda_parameter(self) -> float:
        """Langton's lambda: fraction of table entries leading to a live cell."""
        return float(self._table.mean())

    def __getitem__(self, code: int) -> bool:
        return bool(self._table[code])

    def __len__(self):
        return TABLE_SIZE

    def __hash__(self):
        return hash(self._table.tobytes())

    def __eq__(self, other):
        if not isinstance(other, Rule):
            return False
        return np.array_equal(self._table, other._table)

    def __repr__(self):
        return f"Rule(live_entries={int(self._table.sum())})"


# Some well-known rules for testing
GAME_OF_LIFE = Rule.from_life_like("B3/S23")
HIGHLIFE = Rule.from_life_like("B36/S23")
SEEDS = Rule.from_life_like("B2/S")
