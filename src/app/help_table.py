from __future__ import annotations

from protocol import RuleEngine
from session import EXIT_TOKEN, HELP_TOKEN

CORNER = "v PC/User >"


def format_help_table(rules: RuleEngine) -> str:
    """Grid of results seen by the user: rows are the computer's move, columns the user's.

    Followed by one line per move naming what it beats and what beats it.
    """
    matrix = rules.build_outcome_matrix()
    first_width = max(len(CORNER), *(len(move) for move in rules.moves))
    widths = [max(len(move), len("Draw")) for move in rules.moves]

    def render(cells: list[str]) -> str:
        padded = [f"{cells[0]:{first_width}}"] + [f"{c:{w}}" for c, w in zip(cells[1:], widths)]
        return "| " + " | ".join(padded) + " |"

    separator = "+" + "+".join("-" * (w + 2) for w in [first_width, *widths]) + "+"

    lines: list[str] = [separator, render([CORNER, *rules.moves]), separator]
    for pc in range(rules.size):
        row = [rules.moves[pc]] + [matrix[user][pc] for user in range(rules.size)]
        lines.append(render(row))
        lines.append(separator)

    for index, move in enumerate(rules.moves):
        wins = ", ".join(rules.moves[j] for j in rules.beats(index))
        losses = ", ".join(rules.moves[j] for j in rules.beaten_by(index))
        lines.append(f"{move} beats: {wins}; loses to: {losses}")
    return "\n".join(lines)


def format_menu(rules: RuleEngine) -> str:
    lines = ["Available moves:"]
    lines.extend(f"{i} - {move}" for i, move in enumerate(rules.moves, start=1))
    lines.append(f"{EXIT_TOKEN} - exit")
    lines.append(f"{HELP_TOKEN} - help")
    return "\n".join(lines)
