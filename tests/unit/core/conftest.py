"""Shared fixtures for core unit tests"""

import pytest

from mdregen.core.models import OgpData


SAMPLE_MD = """\
# Guide

An intro with **bold** and a [link](https://example.com).

## Setup

- install
  - pip
- run

## Usage

|name|value|
|-|-|
|a|1|

```python
print("hi")
```
"""


class FakeFetcher:
    """Canned PageFetcher; unknown URLs fail. Records every lookup."""

    def __init__(self, titles=None, ogp=None):
        self.titles = titles or {}
        self.ogp = ogp or {}
        self.calls = []

    def fetch_title(self, url):
        self.calls.append(("title", url))
        return self.titles.get(url)

    def fetch_ogp(self, url):
        self.calls.append(("ogp", url))
        return self.ogp.get(url)


@pytest.fixture(name="fetcher")
def fetcher_fixture():
    return FakeFetcher(
        titles={"https://example.com": "Example Domain"},
        ogp={
            "https://example.com": OgpData(
                title="Example",
                image="https://example.com/card.png",
                description="An example page",
                site_name="example.com",
            ),
        },
    )


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="make_fetcher")
def make_fetcher_fixture():
    return FakeFetcher
