"""
espwatch Vendor Prefix Table
=============================

Immutable table of vendor MAC address prefixes (OUIs) and the prefix
membership query used by the scanner.

The reference data is embedded as ``hex-prefix<TAB>display-form`` rows.
Building the table validates every row; malformed data raises
:class:`PrefixTableError` and is treated as fatal by the entry point.

References:
    - IEEE Registration Authority. MA-L Public Listing (oui.txt).
      https://standards-oui.ieee.org/oui/oui.txt
    - IEEE. (2014). IEEE Std 802-2014. Section 8.2.
"""

from __future__ import annotations

import binascii
from typing import Iterable, Iterator, Optional, Union

from espwatch.core.exceptions import PrefixTableError
from espwatch.core.models import OUI_LENGTH, VendorPrefix


# ---------------------------------------------------------------------------
# Espressif Systems OUI assignments (IEEE MA-L)
# ---------------------------------------------------------------------------

ESPRESSIF_PREFIX_DATA: str = """\
782184\t78-21-84
1097BD\t10-97-BD
30C6F7\t30-C6-F7
24D7EB\t24-D7-EB
70B8F6\t70-B8-F6
485519\t48-55-19
E89F6D\tE8-9F-6D
D4F98D\tD4-F9-8D
4CEBD6\t4C-EB-D6
349454\t34-94-54
686725\t68-67-25
58CF79\t58-CF-79
1091A8\t10-91-A8
90380C\t90-38-0C
58BF25\t58-BF-25
7C87CE\t7C-87-CE
943CC6\t94-3C-C6
6055F9\t60-55-F9
409151\t40-91-51
308398\t30-83-98
1C9DC2\t1C-9D-C2
AC0BFB\tAC-0B-FB
84F703\t84-F7-03
34865D\t34-86-5D
78E36D\t78-E3-6D
98CDAC\t98-CD-AC
9C9C1F\t9C-9C-1F
4C7525\t4C-75-25
441793\t44-17-93
EC94CB\tEC-94-CB
A4E57C\tA4-E5-7C
8C4B14\t8C-4B-14
C8C9A3\tC8-C9-A3
34B472\t34-B4-72
A848FA\tA8-48-FA
34AB95\t34-AB-95
BCFF4D\tBC-FF-4D
C45BBE\tC4-5B-BE
545AA6\t54-5A-A6
2C3AE8\t2C-3A-E8
ECFABC\tEC-FA-BC
DC4F22\tDC-4F-22
B4E62D\tB4-E6-2D
3C71BF\t3C-71-BF
2CF432\t2C-F4-32
4C11AE\t4C-11-AE
B8F009\tB8-F0-09
7C9EBD\t7C-9E-BD
F008D1\tF0-08-D1
483FDA\t48-3F-DA
18FE34\t18-FE-34
A47B9D\tA4-7B-9D
84F3EB\t84-F3-EB
840D8E\t84-0D-8E
C82B96\tC8-2B-96
84CCA8\t84-CC-A8
40F520\t40-F5-20
10521C\t10-52-1C
F4CFA2\tF4-CF-A2
E09806\tE0-98-06
30AEA4\t30-AE-A4
C44F33\tC4-4F-33
D8F15B\tD8-F1-5B
AC67B2\tAC-67-B2
7CDFA1\t7C-DF-A1
8CAAB5\t8C-AA-B5
5CCF7F\t5C-CF-7F
A020A6\tA0-20-A6
24B2DE\t24-B2-DE
D8A01D\tD8-A0-1D
BCDDC2\tBC-DD-C2
CC50E3\tCC-50-E3
A4CF12\tA4-CF-12
2462AB\t24-62-AB
500291\t50-02-91
D8BFC0\tD8-BF-C0
98F4AB\t98-F4-AB
70039F\t70-03-9F
FCF5C4\tFC-F5-C4
ACD074\tAC-D0-74
9097D5\t90-97-D5
600194\t60-01-94
240AC4\t24-0A-C4
68C63A\t68-C6-3A
807D3A\t80-7D-3A
246F28\t24-6F-28
C4DD57\tC4-DD-57
A8032A\tA8-03-2A
24A160\t24-A1-60
E8DB84\tE8-DB-84
E868E7\tE8-68-E7
94B97E\t94-B9-7E
083AF2\t08-3A-F2
E0E2E6\tE0-E2-E6
A0764E\tA0-76-4E
0CDC7E\t0C-DC-7E
3C6105\t3C-61-05
8CCE4E\t8C-CE-4E
"""


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------


def parse_prefix_record(record: str, line_number: Optional[int] = None) -> VendorPrefix:
    """Parse one ``hex-prefix<TAB>display-form`` row.

    Args:
        record: The raw row text (without line terminator).
        line_number: 1-based row number, used in error messages.

    Returns:
        The decoded :class:`VendorPrefix`.

    Raises:
        PrefixTableError: On a wrong column count, undecodable hex, or a
            prefix longer than an OUI.
    """
    columns = record.split("\t")
    if len(columns) != 2:
        raise PrefixTableError(
            f"expected 2 columns, got {len(columns)}",
            line_number=line_number,
            record=record,
        )

    hex_column, display = columns
    try:
        raw = binascii.unhexlify(hex_column)
    except (binascii.Error, ValueError) as exc:
        raise PrefixTableError(
            f"invalid hex prefix {hex_column!r}: {exc}",
            line_number=line_number,
            record=record,
        ) from exc

    if len(raw) > OUI_LENGTH:
        raise PrefixTableError(
            f"prefix {hex_column!r} is {len(raw)} bytes, "
            f"longer than {OUI_LENGTH}",
            line_number=line_number,
            record=record,
        )

    return VendorPrefix(raw=raw, display=display)


# ---------------------------------------------------------------------------
# Prefix Table
# ---------------------------------------------------------------------------


class PrefixTable:
    """Read-only, ordered collection of vendor address prefixes.

    Build it with :meth:`from_records` (validating) or pass already
    decoded prefixes to the constructor.

    Usage::

        table = PrefixTable.from_records(ESPRESSIF_PREFIX_DATA)
        table.matches(bytes.fromhex("782184aabbcc"))   # True
    """

    __slots__ = ("_prefixes",)

    def __init__(self, prefixes: Iterable[Union[VendorPrefix, bytes]] = ()) -> None:
        self._prefixes: tuple[VendorPrefix, ...] = tuple(
            p if isinstance(p, VendorPrefix) else VendorPrefix(raw=bytes(p))
            for p in prefixes
        )

    @classmethod
    def from_records(cls, records: Union[str, Iterable[str]]) -> PrefixTable:
        """Build a table from ``hex-prefix<TAB>display-form`` rows.

        Args:
            records: Either the whole table as text (split on line
                boundaries) or an iterable of individual rows.

        Raises:
            PrefixTableError: If any row is malformed. No partial table
                is returned.
        """
        rows = records.splitlines() if isinstance(records, str) else records
        return cls(
            parse_prefix_record(row, line_number)
            for line_number, row in enumerate(rows, start=1)
        )

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def match(self, address: bytes) -> Optional[VendorPrefix]:
        """Return the first prefix that *address* starts with, or None."""
        for prefix in self._prefixes:
            if prefix.is_prefix_of(address):
                return prefix
        return None

    def matches(self, address: bytes) -> bool:
        """Return True if *address* starts with any prefix in the table.

        Addresses of any length are accepted; a prefix longer than the
        address cannot match.
        """
        return self.match(address) is not None

    # ------------------------------------------------------------------ #
    #  Container protocol
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self._prefixes)

    def __iter__(self) -> Iterator[VendorPrefix]:
        return iter(self._prefixes)

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, (bytes, bytearray, memoryview)):
            return False
        return self.matches(bytes(address))

    def __repr__(self) -> str:
        return f"PrefixTable({len(self._prefixes)} prefixes)"

    @property
    def prefixes(self) -> tuple[VendorPrefix, ...]:
        return self._prefixes


def load_prefix_table(records: Union[str, Iterable[str]]) -> PrefixTable:
    """Module-level convenience wrapper around :meth:`PrefixTable.from_records`."""
    return PrefixTable.from_records(records)


def default_prefix_table() -> PrefixTable:
    """Build the table from the embedded Espressif reference data."""
    return PrefixTable.from_records(ESPRESSIF_PREFIX_DATA)
