"""Turn accumulation: folds fragments into the growing assistant reply."""

from __future__ import annotations

from blackv.stream.decoder import Fragment


class TurnAccumulator:
    """The assistant text for one response, appended to verbatim."""

    def __init__(self) -> None:
        self._text = ""
        self.fragment_count = 0

    @property
    def text(self) -> str:
        return self._text

    def extend(self, fragment: Fragment) -> str:
        """Append the fragment's text and return the whole reply so far."""
        self._text += fragment.text
        self.fragment_count += 1
        return self._text
