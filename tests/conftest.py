"""
Shared fixtures.
"""

import pytest

from fakes import FakeDoc, FakePage


@pytest.fixture
def make_page():
    """Factory: make_page({url: FakeDoc(...)}) -> FakePage."""
    return FakePage


@pytest.fixture
def chain_site():
    """Three pages linked intro -> install -> usage."""
    base = "https://docs.example.com/docs"
    return {
        f"{base}/intro": FakeDoc('<article><h1 id="docs_intro">Intro</h1></article>', f"{base}/install"),
        f"{base}/install": FakeDoc('<article><h1 id="docs_install">Install</h1></article>', f"{base}/usage"),
        f"{base}/usage": FakeDoc('<article><h1 id="docs_usage">Usage</h1></article>', None),
    }
