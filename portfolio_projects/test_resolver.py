"""
Pytest tests for resolver.py (remote -> local source chain).

Run from the repo root:
    pytest portfolio_projects/test_resolver.py -v
"""

import sys
from pathlib import Path

import pytest

# Set up path for imports
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

from portfolio_projects.exceptions import (
    AllSourcesExhaustedError,
    EmptyResultError,
    MalformedLocalFileError,
    SourceUnavailableError,
)
from portfolio_projects.project_types import FailureKind, ListingSource, ProjectRecord
from portfolio_projects.resolver import ListingResolver, attempt_source, resolve_first


REMOTE_PROJECT = ProjectRecord(id=1, title="remote one")
LOCAL_PROJECT = ProjectRecord(id="local", title="local one")


class CountingSource:
    """Zero-arg fetch that counts invocations and returns/raises a canned outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = 0

    def __call__(self, *args):
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return list(self.outcome)


class FakeClient:
    def __init__(self, outcome):
        self.fetch = CountingSource(outcome)
        self.args = []

    def fetch_projects(self, username, pinned):
        self.args.append((username, list(pinned)))
        return self.fetch()


class FakeReader:
    def __init__(self, outcome):
        self.fetch = CountingSource(outcome)
        self.args = []

    def read(self, pinned):
        self.args.append(list(pinned))
        return self.fetch()


def _unavailable(msg="boom"):
    return SourceUnavailableError(source="remote", message=msg)


# ============================================================================
# attempt_source()
# ============================================================================

def test_attempt_source_success():
    result = attempt_source(ListingSource.REMOTE, CountingSource([REMOTE_PROJECT]))
    assert result.ok
    assert result.records == (REMOTE_PROJECT,)


@pytest.mark.parametrize(
    "outcome,kind",
    [
        (_unavailable(), FailureKind.SOURCE_UNAVAILABLE),
        (EmptyResultError(source="remote", message="no match"), FailureKind.EMPTY_RESULT),
        (MalformedLocalFileError(source="local", message="bad"), FailureKind.MALFORMED_LOCAL_FILE),
        (RuntimeError("unexpected"), FailureKind.SOURCE_UNAVAILABLE),
        ([], FailureKind.EMPTY_RESULT),
    ],
)
def test_attempt_source_failures_are_tagged(outcome, kind):
    result = attempt_source(ListingSource.LOCAL, CountingSource(outcome))
    assert not result.ok
    assert result.failure_kind == kind
    assert result.reason


# ============================================================================
# resolve_first() / ListingResolver
# ============================================================================

def test_remote_success_skips_local():
    client, reader = FakeClient([REMOTE_PROJECT]), FakeReader([LOCAL_PROJECT])
    resolver = ListingResolver(client=client, reader=reader, username="someone", pinned=["a", "B"])

    records, source = resolver.resolve()

    assert (records, source) == ([REMOTE_PROJECT], ListingSource.REMOTE)
    assert client.args == [("someone", ["a", "B"])]
    assert reader.fetch.calls == 0


@pytest.mark.parametrize(
    "remote_outcome",
    [_unavailable(), EmptyResultError(source="remote", message="no match"), []],
)
def test_remote_failure_or_empty_invokes_local_exactly_once(remote_outcome):
    client, reader = FakeClient(remote_outcome), FakeReader([LOCAL_PROJECT])
    resolver = ListingResolver(client=client, reader=reader, username="someone", pinned=["a"])

    records, source = resolver.resolve()

    assert (records, source) == ([LOCAL_PROJECT], ListingSource.LOCAL)
    assert client.fetch.calls == 1
    assert reader.fetch.calls == 1
    assert reader.args == [["a"]]


@pytest.mark.parametrize(
    "local_outcome",
    [MalformedLocalFileError(source="local", message="missing"), []],
)
def test_all_sources_failing_raises_after_one_local_attempt(local_outcome):
    client, reader = FakeClient(_unavailable("timeout")), FakeReader(local_outcome)
    resolver = ListingResolver(client=client, reader=reader, username="someone", pinned=["a"])

    with pytest.raises(AllSourcesExhaustedError) as excinfo:
        resolver.resolve()

    assert client.fetch.calls == 1
    assert reader.fetch.calls == 1
    failures = excinfo.value.failures
    assert [f.source for f in failures] == [ListingSource.REMOTE, ListingSource.LOCAL]
    assert "timeout" in str(excinfo.value)


def test_resolve_first_with_no_sources():
    with pytest.raises(AllSourcesExhaustedError):
        resolve_first([])


def test_resolver_without_client_uses_local_only():
    reader = FakeReader([LOCAL_PROJECT])
    resolver = ListingResolver(client=None, reader=reader, username="someone", pinned=[])
    assert resolver.resolve() == ([LOCAL_PROJECT], ListingSource.LOCAL)
