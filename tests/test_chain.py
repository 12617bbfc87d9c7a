"""Tests for the chain resolver."""

import os
from unittest.mock import MagicMock, patch

import pytest

from foundry_secrets import (
    BackendNotFoundError,
    BackendUnavailableError,
    ChainExhaustedError,
    ChainResolver,
    EnvResolver,
    NoResolversConfiguredError,
    OverrideFileResolver,
    ResolutionContext,
    ResolverError,
    SecretResolver,
    parse_secret_ref,
)


class StubResolver(SecretResolver):
    """Resolver that returns a fixed value or raises a fixed error."""

    def __init__(self, name, value=None, error=None):
        self._name = name
        self.value = value
        self.error = error
        self.calls = []
        self.cleaned_up = False

    @property
    def name(self):
        return self._name

    def resolve(self, context, ref):
        self.calls.append((context, ref))
        if self.error is not None:
            raise self.error
        return self.value

    def cleanup(self):
        self.cleaned_up = True


@pytest.fixture
def ref():
    return parse_secret_ref("${secret:database/prod:password}")


@pytest.fixture
def ctx():
    return ResolutionContext(instance="myapp-prod")


class TestChainOrdering:
    """Test first-success-wins ordering."""

    def test_first_success_wins(self, ctx, ref):
        a = StubResolver("a", error=BackendNotFoundError("not in a"))
        b = StubResolver("b", error=BackendUnavailableError("b is down"))
        c = StubResolver("c", value="X")
        d = StubResolver("d", value="never")

        chain = ChainResolver([a, b, c, d])

        assert chain.resolve(ctx, ref) == "X"
        assert len(a.calls) == 1
        assert len(b.calls) == 1
        assert len(c.calls) == 1
        assert d.calls == []

    def test_same_context_and_ref_passed_through(self, ctx, ref):
        a = StubResolver("a", value="v")
        ChainResolver([a]).resolve(ctx, ref)
        assert a.calls == [(ctx, ref)]

    def test_empty_string_is_a_success(self, ctx, ref):
        a = StubResolver("a", value="")
        b = StubResolver("b", value="later")
        assert ChainResolver([a, b]).resolve(ctx, ref) == ""
        assert b.calls == []

    def test_introspection(self):
        chain = ChainResolver([StubResolver("a"), StubResolver("b")])
        assert chain.name == "chain"
        assert len(chain) == 2
        assert chain.resolver_names() == ["a", "b"]

    def test_chain_can_nest(self, ctx, ref):
        inner = ChainResolver([StubResolver("a", error=BackendNotFoundError("miss"))])
        outer = ChainResolver([inner, StubResolver("b", value="nested")])
        assert outer.resolve(ctx, ref) == "nested"

    def test_exhausted_inner_chain_is_recorded_by_outer(self, ctx, ref):
        inner = ChainResolver([StubResolver("a", error=BackendNotFoundError("miss"))])
        outer = ChainResolver([inner, StubResolver("b", error=BackendNotFoundError("also miss"))])

        with pytest.raises(ChainExhaustedError) as exc_info:
            outer.resolve(ctx, ref)

        assert [(pos, name) for pos, name, _ in exc_info.value.failures] == [
            (1, "chain"),
            (2, "b"),
        ]
        assert isinstance(exc_info.value.failures[0][2], ChainExhaustedError)
        assert isinstance(exc_info.value, ResolverError)


class TestChainFailures:
    """Test aggregated and hard failures."""

    def test_exhausted_lists_every_attempt(self, ctx, ref):
        chain = ChainResolver(
            [
                StubResolver("env", error=BackendNotFoundError("environment variable X not set")),
                StubResolver("openbao", error=BackendUnavailableError("connection refused")),
            ]
        )

        with pytest.raises(ChainExhaustedError) as exc_info:
            chain.resolve(ctx, ref)

        message = str(exc_info.value)
        assert "myapp-prod/database/prod:password" in message
        assert "after trying 2 resolver(s)" in message
        assert message.index("resolver 1 (env)") < message.index("resolver 2 (openbao)")
        assert "environment variable X not set" in message
        assert "connection refused" in message

        assert exc_info.value.full_key == "myapp-prod/database/prod:password"
        assert [(pos, name) for pos, name, _ in exc_info.value.failures] == [
            (1, "env"),
            (2, "openbao"),
        ]

    def test_empty_chain(self, ctx, ref):
        with pytest.raises(NoResolversConfiguredError, match="no resolvers configured"):
            ChainResolver().resolve(ctx, ref)

    def test_non_resolver_errors_propagate(self, ctx, ref):
        """Programming errors are not swallowed as misses."""
        a = StubResolver("a", error=KeyError("bug"))
        b = StubResolver("b", value="unreached")

        with pytest.raises(KeyError):
            ChainResolver([a, b]).resolve(ctx, ref)
        assert b.calls == []


class TestChainCleanup:
    """Test cleanup fan-out."""

    def test_cleanup_reaches_every_member(self):
        a = StubResolver("a")
        b = StubResolver("b")

        with ChainResolver([a, b]):
            pass

        assert a.cleaned_up
        assert b.cleaned_up

    def test_cleanup_error_does_not_stop_others(self):
        broken = MagicMock(spec=SecretResolver)
        broken.name = "broken"
        broken.cleanup.side_effect = RuntimeError("boom")
        b = StubResolver("b")

        ChainResolver([broken, b]).cleanup()
        assert b.cleaned_up


class TestEndToEnd:
    """Resolve through the real env and override file resolvers."""

    def test_resolves_from_environment(self, tmp_path):
        ref = parse_secret_ref("${secret:database/prod:password}")
        chain = ChainResolver([EnvResolver(), OverrideFileResolver(tmp_path / ".foundryvars")])

        with patch.dict(os.environ, {"FOUNDRY_SECRET_MYAPP_PROD_DATABASE_PROD_PASSWORD": "s3cr3t"}):
            assert chain.resolve(ResolutionContext(instance="myapp-prod"), ref) == "s3cr3t"

    def test_environment_shadows_override_file(self, tmp_path):
        path = tmp_path / ".foundryvars"
        path.write_text("myapp-prod/database/prod:password=from-file\n")
        ref = parse_secret_ref("${secret:database/prod:password}")
        ctx = ResolutionContext(instance="myapp-prod")
        chain = ChainResolver([EnvResolver(), OverrideFileResolver(path)])

        assert chain.resolve(ctx, ref) == "from-file"
        with patch.dict(os.environ, {"FOUNDRY_SECRET_MYAPP_PROD_DATABASE_PROD_PASSWORD": "from-env"}):
            assert chain.resolve(ctx, ref) == "from-env"

    def test_nothing_configured(self, tmp_path):
        ref = parse_secret_ref("${secret:database/prod:password}")
        chain = ChainResolver([EnvResolver(), OverrideFileResolver(tmp_path / ".foundryvars")])

        with pytest.raises(ChainExhaustedError) as exc_info:
            chain.resolve(ResolutionContext(instance="myapp-prod"), ref)

        message = str(exc_info.value)
        assert "myapp-prod/database/prod:password" in message
        assert "resolver 1 (env)" in message
        assert "resolver 2 (override-file)" in message
