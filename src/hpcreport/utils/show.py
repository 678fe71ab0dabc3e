"""
Haskell ``show`` rendering of strings.

HPC writes paths and module names with ``show``, and error messages quote
them the same way, so a path prints identically in a mix file and in the
message about it. The ASCII control-character names are shared with the
reader in ``hpcreport.readers.haskell``.
"""

ASCII_NAMES = {
    "NUL": 0, "SOH": 1, "STX": 2, "ETX": 3, "EOT": 4, "ENQ": 5, "ACK": 6,
    "BEL": 7, "BS": 8, "HT": 9, "LF": 10, "VT": 11, "FF": 12, "CR": 13,
    "SO": 14, "SI": 15, "DLE": 16, "DC1": 17, "DC2": 18, "DC3": 19,
    "DC4": 20, "NAK": 21, "SYN": 22, "ETB": 23, "CAN": 24, "EM": 25,
    "SUB": 26, "ESC": 27, "FS": 28, "GS": 29, "RS": 30, "US": 31,
    "SP": 32, "DEL": 127,
}

_CONTROL_NAMES = {code: name for name, code in ASCII_NAMES.items() if code < 32}

_SHOWN_ESCAPES = {
    "\a": "\\a", "\b": "\\b", "\f": "\\f", "\n": "\\n",
    "\r": "\\r", "\t": "\\t", "\v": "\\v",
    "\\": "\\\\", '"': '\\"', "\x7f": "\\DEL",
}


def show_string(value) -> str:
    """
    Render ``value`` as Haskell's ``show`` renders a ``String``.

    Characters above DEL become decimal escapes, control characters use
    their ASCII names, and ``\\&`` separates an escape from a following
    character that would otherwise extend it (``"\\233\\&1"``, ``"\\SO\\&H"``).
    """
    text = str(value)
    out = []
    for index, char in enumerate(text):
        following = text[index + 1] if index + 1 < len(text) else ""
        code = ord(char)
        if char in _SHOWN_ESCAPES:
            out.append(_SHOWN_ESCAPES[char])
        elif code > 127:
            out.append(f"\\{code}")
            if following.isdigit() and following.isascii():
                out.append("\\&")
        elif code < 32:
            out.append("\\" + _CONTROL_NAMES[code])
            if code == 14 and following == "H":
                out.append("\\&")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


__all__ = ["ASCII_NAMES", "show_string"]
