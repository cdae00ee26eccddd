from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String


class LogStyle(Style):
    """Muted palette for the JSON blob appended to log lines."""

    styles = {
        Name.Tag: "ansicyan",
        String: "ansigreen",
        String.Double: "ansigreen",
        Number: "ansiyellow",
        Keyword.Constant: "ansimagenta",
        Punctuation: "ansibrightblack",
    }
