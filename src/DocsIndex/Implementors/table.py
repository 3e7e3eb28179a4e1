"""Implementors of ``snafu::ErrorCompat`` across the validator node crates.

Literal data captured from the rustdoc build of the workspace. Each call to
``build_error_compat_table`` constructs a fresh, equal table.
"""

from __future__ import annotations

from .types import ImplementorDescriptor, ImplementorTable, validate_groups

__all__ = ["TRAIT_PATH", "TRAIT_NAME", "build_error_compat_table"]

TRAIT_PATH = "snafu::ErrorCompat"
TRAIT_NAME = "ErrorCompat"


def _impl(kind: str, href: str, path: str) -> ImplementorDescriptor:
    name = path.rsplit("::", 1)[-1]
    text = (
        f'impl {TRAIT_NAME} for <a class="{kind}" href="{href}" '
        f'title="{kind} {path}">{name}</a>'
    )
    return ImplementorDescriptor(text=text, synthetic=False, types=(path,), href=href)


def build_error_compat_table() -> ImplementorTable:
    groups = {
        "address_book": [
            _impl("enum", "address_book/error/enum.AddressBookError.html", "address_book::error::AddressBookError"),
        ],
        "espresso_availability_api": [
            _impl("enum", "espresso_availability_api/api/enum.Error.html", "espresso_availability_api::api::Error"),
        ],
        "espresso_catchup_api": [
            _impl("enum", "espresso_catchup_api/api/enum.Error.html", "espresso_catchup_api::api::Error"),
        ],
        "espresso_core": [
            _impl("enum", "espresso_core/reward/enum.RewardError.html", "espresso_core::reward::RewardError"),
            _impl("enum", "espresso_core/state/enum.ValidationError.html", "espresso_core::state::ValidationError"),
        ],
        "espresso_esqs": [
            _impl("enum", "espresso_esqs/enum.ApiError.html", "espresso_esqs::ApiError"),
        ],
        "espresso_metastate_api": [
            _impl("enum", "espresso_metastate_api/api/enum.Error.html", "espresso_metastate_api::api::Error"),
        ],
        "espresso_status_api": [
            _impl("enum", "espresso_status_api/api/enum.Error.html", "espresso_status_api::api::Error"),
        ],
        "espresso_validator": [
            _impl("enum", "espresso_validator/enum.ParseRatioError.html", "espresso_validator::ParseRatioError"),
            _impl("struct", "espresso_validator/struct.ParseDurationError.html", "espresso_validator::ParseDurationError"),
        ],
        "espresso_validator_api": [
            _impl("enum", "espresso_validator_api/api/enum.Error.html", "espresso_validator_api::api::Error"),
        ],
        "faucet_types": [
            _impl("enum", "faucet_types/enum.FaucetError.html", "faucet_types::FaucetError"),
        ],
    }
    return ImplementorTable(trait=TRAIT_PATH, groups=validate_groups(groups))
