from typing import Tuple


def slugify(text: str) -> str:
    """Lower-case, turn non-alphanumerics into spaces and join the words with '-'."""
    cleaned = "".join(c if c.isalnum() else " " for c in text.lower())
    return "-".join(cleaned.split())


def calculate_reading_time(text: str, words_per_minute: int = 200) -> Tuple[int, int]:
    """Return (reading_time_minutes, word_count) for a raw markdown body."""
    word_count = len(text.split())
    reading_time = max(1, word_count // words_per_minute)
    return reading_time, word_count


def strip_html_tags(html: str) -> str:
    output = []
    in_tag = False
    for c in html:
        if c == "<":
            in_tag = True
        elif c == ">":
            in_tag = False
        elif not in_tag:
            output.append(c)
    return "".join(output)
