"""Tests for the implementor table loader and the built-in table."""

import logging

import pytest

from DocsIndex.Implementors.errors import AlreadyDeliveredError
from DocsIndex.Implementors.loader import ImplementorTableLoader, LoaderState, load_implementors
from DocsIndex.Implementors.logging import StructuredLogger
from DocsIndex.Implementors.registry import DeliveryOutcome, get_registry
from DocsIndex.Implementors.table import TRAIT_PATH, build_error_compat_table
from DocsIndex.Implementors.types import ImplementorTable


class TestErrorCompatTable:
    def test_is_deterministic(self):
        assert build_error_compat_table() == build_error_compat_table()

    def test_groups(self):
        table = build_error_compat_table()
        assert table.trait == TRAIT_PATH
        assert table.group_sizes() == {
            "address_book": 1,
            "espresso_availability_api": 1,
            "espresso_catchup_api": 1,
            "espresso_core": 2,
            "espresso_esqs": 1,
            "espresso_metastate_api": 1,
            "espresso_status_api": 1,
            "espresso_validator": 2,
            "espresso_validator_api": 1,
            "faucet_types": 1,
        }

    def test_every_group_well_formed(self):
        for name, descriptors in build_error_compat_table().groups.items():
            assert name
            assert descriptors
            for descriptor in descriptors:
                assert descriptor.synthetic is False
                assert descriptor.types and descriptor.types[0].startswith(f"{name}::")
                assert descriptor.href.startswith(f"{name}/")

    def test_struct_implementor(self):
        validator = build_error_compat_table().groups["espresso_validator"]
        assert validator[1].label == "impl ErrorCompat for ParseDurationError"
        assert validator[1].href == "espresso_validator/struct.ParseDurationError.html"


def _two_group_table(groups):
    return lambda: ImplementorTable(trait="t::T", groups=groups)


class TestImplementorTableLoader:
    def test_consumer_present_called_once_with_mapping(self, registry, alpha_beta_groups):
        calls = []
        registry.try_set_consumer(calls.append)
        loader = ImplementorTableLoader(build=_two_group_table(alpha_beta_groups), registry=registry)

        assert loader.load() is DeliveryOutcome.CALLBACK

        assert len(calls) == 1
        assert {name: len(descs) for name, descs in calls[0].items()} == {"alpha": 1, "beta": 2}
        assert registry.pending is None

    def test_consumer_absent_parks_mapping(self, registry, alpha_beta_groups):
        loader = ImplementorTableLoader(build=_two_group_table(alpha_beta_groups), registry=registry)

        assert loader.load() is DeliveryOutcome.PENDING

        assert registry.pending == alpha_beta_groups
        assert not registry.has_consumer()

    def test_state_transitions_once(self, registry):
        loader = ImplementorTableLoader(registry=registry)
        assert loader.state is LoaderState.UNINITIALIZED
        assert loader.table is None

        loader.load()

        assert loader.state is LoaderState.DELIVERED
        assert loader.table == build_error_compat_table()
        with pytest.raises(AlreadyDeliveredError):
            loader.load()
        assert loader.state is LoaderState.DELIVERED

    def test_repeated_loads_deliver_identical_mappings(self, registry):
        ImplementorTableLoader(registry=registry).load()
        first = registry.take_pending()
        ImplementorTableLoader(registry=registry).load()
        assert registry.take_pending() == first

    def test_defaults_to_global_registry(self):
        assert load_implementors() is DeliveryOutcome.PENDING
        pending = get_registry().pending
        assert pending is not None
        assert "espresso_core" in pending

    def test_failing_consumer_still_terminal(self, registry):
        calls = []

        def explode(mapping):
            calls.append(mapping)
            raise RuntimeError("index unavailable")

        registry.try_set_consumer(explode)
        loader = ImplementorTableLoader(registry=registry)

        with pytest.raises(RuntimeError):
            loader.load()

        assert loader.state is LoaderState.DELIVERED
        with pytest.raises(AlreadyDeliveredError):
            loader.load()
        assert len(calls) == 1

    def test_logs_through_given_logger(self, registry, caplog):
        log = StructuredLogger(logging.getLogger("DocsIndex.loader-test"), {"command": "load"})
        with caplog.at_level(logging.INFO, logger="DocsIndex.loader-test"):
            ImplementorTableLoader(registry=registry, log=log).load()
        record = caplog.records[-1]
        assert record.name == "DocsIndex.loader-test"
        assert record.extra_fields["command"] == "load"
        assert record.extra_fields["outcome"] == "pending"
        assert record.extra_fields["descriptors"] == 12
