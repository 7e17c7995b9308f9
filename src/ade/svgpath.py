"""Handling Paths for SVG: tokenizing, number formatting and string level transforms."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Tuple

from ade.common import CmdFamily

SvgToken = Tuple[str, List[float]]

###############################################################################
# PathCommandInfo
###############################################################################


@dataclass(frozen=True)
class PathCommandInfo:
    """Metadata for SVG path commands.

    Attributes:
        args_per_repeat: Number of numeric arguments consumed by one repetition
        family: Command family used to decide whether S/T may reflect
        is_drawing: Whether this command draws (vs. move)
    """

    args_per_repeat: int
    family: CmdFamily = CmdFamily.OTHER
    is_drawing: bool = True


# Command registry with metadata, keyed by the absolute (uppercase) letter
COMMAND_INFO: Dict[str, PathCommandInfo] = {
    "M": PathCommandInfo(2, CmdFamily.OTHER, False),
    "L": PathCommandInfo(2),
    "H": PathCommandInfo(1),
    "V": PathCommandInfo(1),
    "C": PathCommandInfo(6, CmdFamily.CUBIC),
    "S": PathCommandInfo(4, CmdFamily.CUBIC),
    "Q": PathCommandInfo(4, CmdFamily.QUADRATIC),
    "T": PathCommandInfo(2, CmdFamily.QUADRATIC),
    "A": PathCommandInfo(7),
    "Z": PathCommandInfo(0),
}


###############################################################################
# AdSvgPath
###############################################################################


class AdSvgPath:
    """
    This class provides a collection of static methods for manipulation of SVG-paths.
    A SVG-path is characterized by a string describing a sequence of points.
    The points' connection types are according to their commands.
    Commands (command : number of values : command-character):
        MoveTo:           2: Mm
        LineTo:           2: Ll   1: Hh(x)   1:Vv(y)
        CubicBezier:      6: Cc   4: Ss
        QuadraticBezier:  4: Qq   2: Tt
        ArcCurve:         7: Aa
        ClosePath:        0: Zz

    None of the methods raise on malformed input: whatever cannot be parsed is dropped.
    """

    # Command letters:
    SVG_CMDS: ClassVar[str] = "MmLlHhVvCcSsQqTtAaZz"
    # Definition of a number:
    SVG_ARGS: ClassVar[str] = r"-?\d*\.?\d+(?:[eE][-+]?\d+)?"

    _TOKEN_PATTERN: ClassVar[re.Pattern] = re.compile(rf"([A-Za-z])|({SVG_ARGS})")

    @staticmethod
    def tokenize(path_string: str) -> List[SvgToken]:
        """
        Scan the given _path_string_ into a list of (command-letter, arguments) tuples.

        Characters which neither start a command letter nor a number are skipped.
        Numbers in front of the first command and letters which are no SVG commands
        (together with their numbers) are dropped. Every command is emitted with all of
        its numbers, even if they do not add up to a complete repetition.

        Args:
            path_string (str): a SVG path string

        Returns:
            List[Tuple[str, List[float]]]: the commands in order of appearance
        """
        tokens: List[SvgToken] = []
        if not path_string:
            return tokens

        current_args = None
        for match in AdSvgPath._TOKEN_PATTERN.finditer(path_string):
            letter, number = match.group(1), match.group(2)
            if letter:
                if letter in AdSvgPath.SVG_CMDS:
                    current_args = []
                    tokens.append((letter, current_args))
                else:
                    current_args = None  # unknown command swallows its numbers
            elif current_args is not None:
                current_args.append(float(number))
        return tokens

    @staticmethod
    def repetitions(command_letter: str, args: List[float]) -> int:
        """Return the number of complete repetitions the _args_ provide for _command_letter_."""
        per_repeat = COMMAND_INFO[command_letter.upper()].args_per_repeat
        if per_repeat == 0:
            return 0
        return len(args) // per_repeat

    @staticmethod
    def format_number(value: float) -> str:
        """Format _value_ with at most 2 decimal places, e.g. 10.0 -> "10", 1.257 -> "1.26"."""
        text = f"{value:.2f}".rstrip("0").rstrip(".")
        if text in ("", "-0"):
            return "0"
        return text

    @staticmethod
    def _shift_absolute(command_letter: str, args: List[float], dx: float, dy: float) -> List[str]:
        """Offset one repetition of _args_ as if they were absolute coordinates."""
        cmd = command_letter.upper()
        fmt = AdSvgPath.format_number
        if cmd == "H":
            return [fmt(args[0] + dx)]
        if cmd == "V":
            return [fmt(args[0] + dy)]
        if cmd == "A":
            (rx, ry, angle, large_arc, sweep, x, y) = args
            return [
                fmt(rx),
                fmt(ry),
                fmt(angle),
                "1" if large_arc else "0",
                "1" if sweep else "0",
                fmt(x + dx),
                fmt(y + dy),
            ]
        # all remaining commands consist of (x,y) pairs only
        return [fmt(value + (dx if i % 2 == 0 else dy)) for i, value in enumerate(args)]

    @staticmethod
    def _copy_relative(command_letter: str, args: List[float]) -> List[str]:
        """Re-emit one repetition of _args_ unchanged (formatted)."""
        fmt = AdSvgPath.format_number
        if command_letter.upper() == "A":
            (rx, ry, angle, large_arc, sweep, x, y) = args
            return [fmt(rx), fmt(ry), fmt(angle), "1" if large_arc else "0", "1" if sweep else "0", fmt(x), fmt(y)]
        return [fmt(value) for value in args]

    @staticmethod
    def move_path_by(path_string: str, dx: float, dy: float) -> str:
        """Translate the given SVG _path_string_ by (dx, dy) keeping every command letter as it is.

        Absolute coordinates get the offset added. Relative coordinates are offsets from the
        previous (already shifted) point and are copied unchanged, except for a relative
        moveto opening the path: it has no previous point and therefore gets the offset.
        Arc radii, rotation and flags are never shifted.

        Args:
            path_string (str): SVG path string input
            dx (float): offset in x-direction
            dy (float): offset in y-direction

        Returns:
            str: the translated path string
        """
        if not path_string or not path_string.strip():
            return path_string

        ret_commands = []
        seen_move = False
        for command_letter, args in AdSvgPath.tokenize(path_string):
            per_repeat = COMMAND_INFO[command_letter.upper()].args_per_repeat
            parts = [command_letter]
            for rep in range(AdSvgPath.repetitions(command_letter, args)):
                rep_args = args[rep * per_repeat : (rep + 1) * per_repeat]
                if command_letter.isupper():
                    parts.extend(AdSvgPath._shift_absolute(command_letter, rep_args, dx, dy))
                # only an m opening the path; an m after an absolute M follows a shifted point
                elif command_letter == "m" and rep == 0 and not seen_move:
                    parts.extend(AdSvgPath._shift_absolute(command_letter, rep_args, dx, dy))
                else:
                    parts.extend(AdSvgPath._copy_relative(command_letter, rep_args))
            if command_letter in "Mm":
                seen_move = True
            ret_commands.append(" ".join(parts))

        return " ".join(ret_commands)

    @staticmethod
    def offset_path_d(path_string: str, dx: float, dy: float) -> str:
        """Offset every coordinate of the given _path_string_ by (dx, dy).

        Lossy sibling of move_path_by() meant for absolute-only paths: the relative or
        absolute nature of a command is ignored and all coordinates are shifted.
        Command letters are kept as they are.

        Args:
            path_string (str): SVG path string using absolute coordinates
            dx (float): offset in x-direction
            dy (float): offset in y-direction

        Returns:
            str: the offset path string
        """
        ret_commands = []
        for command_letter, args in AdSvgPath.tokenize(path_string):
            per_repeat = COMMAND_INFO[command_letter.upper()].args_per_repeat
            parts = [command_letter]
            for rep in range(AdSvgPath.repetitions(command_letter, args)):
                rep_args = args[rep * per_repeat : (rep + 1) * per_repeat]
                parts.extend(AdSvgPath._shift_absolute(command_letter, rep_args, dx, dy))
            ret_commands.append(" ".join(parts))
        return " ".join(ret_commands)
