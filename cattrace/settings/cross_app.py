import typing as t

from cattrace.internal.utils.formats import parse_id_set
from cattrace.settings._core import CATConfig


def _derive_enabled(config: "CrossAppTracingConfig") -> bool:
    # Nothing can be obfuscated without a shared key
    return bool(config._enabled and config.encoding_key)


class CrossAppTracingConfig(CATConfig):
    __prefix__ = "cat"

    _enabled = CATConfig.v(
        bool,
        "cross_application_tracer_enabled",
        default=True,
        help_type="Boolean",
        help="Enables cross application tracing",
    )

    encoding_key = CATConfig.v(
        t.Optional[str],
        "encoding_key",
        default=None,
        help_type="String",
        help="Shared secret used to obfuscate cross application metadata. "
        "Cross application tracing stays disabled until it is set.",
    )

    cross_process_id = CATConfig.v(
        t.Optional[str],
        "cross_process_id",
        default=None,
        help_type="String",
        help="Identifier of this application, ``<account-id>#<application-id>``, reported to callers and callees",
    )

    trusted_account_ids = CATConfig.v(
        set,
        "trusted_account_ids",
        parser=parse_id_set,
        default=set(),
        help_type="List",
        help="Comma separated accounts (``1``) or applications (``1#1``) whose metadata is honored",
    )

    app_name = CATConfig.v(
        str,
        "app_name",
        default="python-application",
        help_type="String",
        help="Application name used to compute path hashes for outbound requests",
    )

    enabled = CATConfig.d(bool, _derive_enabled)
