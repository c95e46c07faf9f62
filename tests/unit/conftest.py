"""Conftest for unit tests - automatically mark all tests as unit tests."""

import pytest

from search_analysis.analysis.tokens import Token, TokenStream


def pytest_collection_modifyitems(config, items):
    """Automatically mark all tests in the unit directory as unit tests."""
    for item in items:
        # Add unit marker to all tests in the unit directory
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


class ListTokenStream(TokenStream):
    """Replays prepared tokens; lets filter tests control positions and offsets."""

    def __init__(self, tokens):
        super().__init__()
        self._tokens = iter(tokens)

    def _advance(self):
        token = next(self._tokens, None)
        if token is None:
            return False
        self._token = token.copy_with()
        return True


@pytest.fixture
def list_stream():
    """Build a stream from Token objects or (text, position) pairs laid out with single spaces."""

    def build(*items):
        tokens = []
        offset = 0
        for item in items:
            if isinstance(item, Token):
                tokens.append(item)
                continue
            text, position = item if isinstance(item, tuple) else (item, len(tokens))
            tokens.append(Token(text=text, position=position, start_offset=offset, end_offset=offset + len(text)))
            offset += len(text) + 1
        return ListTokenStream(tokens)

    return build
