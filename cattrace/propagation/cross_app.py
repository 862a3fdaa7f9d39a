"""
Cross Application Tracing
-------------------------

Links the transaction of a calling application with the transaction it
triggers in a called application. Both sides exchange small JSON documents,
obfuscated with the account's shared ``encoding_key``:

- the caller sends request metadata::

    {"NewRelicID": "1#23", "NewRelicTransaction": [guid, record_tt, trip_id, path_hash]}

- the callee answers with response metadata::

    {"NewRelicAppData": [cross_process_id, transaction_name, queue_time, app_time, -1, guid]}

Metadata is only honored when the sender's id is trusted, and the callee only
answers trusted callers. None of the operations here raise: a failure is
logged and the host application carries on untraced.
"""
import hashlib
import json
from typing import Any
from typing import Callable
from typing import NamedTuple
from typing import Optional
from typing import Union

from ..constants import CAT_APP_DATA_CONTENT_LENGTH
from ..constants import CAT_APP_DATA_KEY
from ..constants import CAT_ID_KEY
from ..constants import CAT_SYNTHETICS_KEY
from ..constants import CAT_TRANSACTION_KEY
from ..errors import EncodingFailure
from ..errors import MalformedPayload
from ..errors import UntrustedIdentifier
from ..internal.compat import is_integer
from ..internal.logger import get_logger
from ..settings.cross_app import CrossAppTracingConfig
from .._trace.segment import ExternalRequestSegment
from .._trace.transaction import Transaction
from .._trace.transaction import TransactionTimings
from .obfuscation import Obfuscator
from .trust import TrustRegistry


log = get_logger(__name__)


class CrossAppResponse(NamedTuple):
    cross_process_id: str
    transaction_name: Any
    queue_time_in_seconds: float
    app_time_in_seconds: float
    content_length: int
    transaction_guid: Optional[str]


def generate_path_hash(name, seed):
    # type: (str, int) -> str
    """Returns the 8 hex digit path hash of ``name``, chained onto the referring path hash ``seed``."""
    rotated = ((seed << 1) | (seed >> 31)) & 0xFFFFFFFF
    digest = hashlib.md5(name.encode("utf-8")).hexdigest()  # nosec
    return "{:08x}".format(rotated ^ int(digest[-8:], 16))


def assign_intrinsic_transaction_attributes(transaction: Transaction) -> None:
    """Records what the referring transaction told us as intrinsic attributes of ``transaction``."""
    attrs = transaction.intrinsic_attributes
    attrs["client_cross_process_id"] = transaction.client_cross_app_id

    info = transaction.referring_transaction_info
    if not isinstance(info, list):
        return

    if len(info) > 0 and isinstance(info[0], str):
        attrs["referring_transaction_guid"] = info[0]
    # record_tt is OR'd so a later request cannot turn off a trace an earlier one asked for
    if len(info) > 1 and isinstance(info[1], bool):
        transaction.record_tt = transaction.record_tt or info[1]
    if len(info) > 2 and isinstance(info[2], str):
        attrs["trip_id"] = info[2]
    if len(info) > 3 and isinstance(info[3], str):
        attrs["referring_path_hash"] = info[3]


class _LinkageState(NamedTuple):
    """What processing request metadata may change on a transaction."""

    client_cross_app_id: Optional[str]
    referring_transaction_info: Any
    synthetics_payload: Any
    raw_synthetics_header: Optional[str]
    record_tt: bool
    intrinsic_attributes: dict

    @classmethod
    def of(cls, transaction):
        # type: (Transaction) -> _LinkageState
        return cls(
            transaction.client_cross_app_id,
            transaction.referring_transaction_info,
            transaction.synthetics_payload,
            transaction.raw_synthetics_header,
            transaction.record_tt,
            dict(transaction.intrinsic_attributes),
        )

    def restore(self, transaction):
        # type: (Transaction) -> None
        transaction.client_cross_app_id = self.client_cross_app_id
        transaction.referring_transaction_info = self.referring_transaction_info
        transaction.synthetics_payload = self.synthetics_payload
        transaction.raw_synthetics_header = self.raw_synthetics_header
        transaction.record_tt = self.record_tt
        transaction.intrinsic_attributes.clear()
        transaction.intrinsic_attributes.update(self.intrinsic_attributes)


def _present(value):
    # type: (Any) -> bool
    # Only a missing key or an explicit false means "not given"
    return value is not None and value is not False


def _json_dumps(obj):
    # type: (Any) -> str
    return json.dumps(obj, separators=(",", ":"))


class CrossAppPropagator(object):
    """Reads and writes cross application metadata for transactions of this process.

    The propagator holds no per-transaction state: every call receives the
    transaction it acts on, and the configuration is read only.
    """

    def __init__(
        self,
        config: CrossAppTracingConfig,
        trust_registry: Optional[TrustRegistry] = None,
        obfuscator: Optional[Obfuscator] = None,
        assign_intrinsics: Callable[[Transaction], None] = assign_intrinsic_transaction_attributes,
    ) -> None:
        self.config = config
        self.trust_registry = trust_registry or TrustRegistry(config)
        self.obfuscator = obfuscator or Obfuscator(config.encoding_key)
        self._assign_intrinsics = assign_intrinsics

    @property
    def enabled(self) -> bool:
        return self.trust_registry.is_enabled()

    def _decode(self, raw):
        # type: (Union[str, bytes]) -> dict
        payload = json.loads(self.obfuscator.deobfuscate(raw).decode("utf-8"))
        if not isinstance(payload, dict):
            raise MalformedPayload("expected a JSON object, got %s" % type(payload).__name__)
        return payload

    def _encode(self, payload):
        # type: (dict) -> str
        try:
            return self.obfuscator.obfuscate(_json_dumps(payload))
        except (TypeError, ValueError) as e:
            raise EncodingFailure("unable to encode %s" % sorted(payload)) from e

    def process_request_metadata(self, raw, transaction):
        # type: (Union[str, bytes], Optional[Transaction]) -> None
        """Links ``transaction`` to the calling transaction described by ``raw`` request metadata.

        Either the whole payload is applied, or nothing when it cannot be read
        or comes from an untrusted application.
        """
        if not self.enabled or transaction is None:
            return None
        if transaction.client_cross_app_id is not None:
            log.debug("transaction %s is already linked to %s", transaction.guid, transaction.client_cross_app_id)
            return None

        try:
            self._apply_request_metadata(raw, transaction)
        except UntrustedIdentifier as e:
            log.error("error processing request metadata: %s", e)
        except Exception:
            log.error("error during process_request_metadata", exc_info=True)
        return None

    def _apply_request_metadata(self, raw, transaction):
        # type: (Union[str, bytes], Transaction) -> None
        rmd = self._decode(raw)

        cross_app_id = rmd.get(CAT_ID_KEY)
        if not self.trust_registry.is_trusted(cross_app_id):
            raise UntrustedIdentifier(cross_app_id)

        txn_info = rmd.get(CAT_TRANSACTION_KEY)
        synthetics = rmd.get(CAT_SYNTHETICS_KEY)
        raw_synthetics = self._encode_synthetics(synthetics) if _present(synthetics) else None

        saved = _LinkageState.of(transaction)
        transaction.client_cross_app_id = cross_app_id
        if _present(synthetics):
            transaction.synthetics_payload = synthetics
            transaction.raw_synthetics_header = raw_synthetics
        if _present(txn_info):
            transaction.referring_transaction_info = txn_info
            try:
                self._assign_intrinsics(transaction)
            except Exception:
                saved.restore(transaction)
                raise

    def _encode_synthetics(self, synthetics):
        # type: (Any) -> str
        return self.obfuscator.obfuscate(_json_dumps(synthetics))

    def get_response_metadata(self, transaction, timings=None):
        # type: (Optional[Transaction], Optional[TransactionTimings]) -> Optional[str]
        """Returns the obfuscated response metadata telling a trusted caller about ``transaction``.

        Returns ``None`` when there is no trusted caller to answer or the
        transaction is ignored. The transaction name is frozen, since it is
        reported to the caller.
        """
        if not self.enabled or transaction is None or not transaction.client_cross_app_id:
            return None

        try:
            return transaction.freeze_name_and_execute_if_not_ignored(
                lambda: self._build_response_metadata(transaction, timings)
            )
        except Exception:
            log.error("error during get_response_metadata", exc_info=True)
            return None

    def _build_response_metadata(self, transaction, timings):
        # type: (Transaction, Optional[TransactionTimings]) -> str
        if timings is None:
            timings = transaction.timings
        rmd = {
            CAT_APP_DATA_KEY: [
                self.config.cross_process_id,
                timings.transaction_name,
                float(timings.queue_time_in_seconds),
                float(timings.app_time_in_seconds),
                CAT_APP_DATA_CONTENT_LENGTH,
                transaction.guid,
            ]
        }
        return self._encode(rmd)

    def path_hash(self, transaction):
        # type: (Transaction) -> str
        try:
            seed = int(transaction.referring_path_hash or "0", 16)
        except ValueError:
            seed = 0
        return generate_path_hash("%s;%s" % (self.config.app_name, transaction.name), seed)

    def get_request_metadata(self, transaction):
        # type: (Optional[Transaction]) -> Optional[str]
        """Returns the obfuscated request metadata to send along a call made by ``transaction``."""
        if not self.enabled or transaction is None or not self.config.cross_process_id:
            return None

        try:
            rmd = {
                CAT_ID_KEY: self.config.cross_process_id,
                CAT_TRANSACTION_KEY: [
                    transaction.guid,
                    transaction.record_tt,
                    transaction.trip_id,
                    self.path_hash(transaction),
                ],
            }
            if transaction.synthetics_payload:
                rmd[CAT_SYNTHETICS_KEY] = transaction.synthetics_payload
            return self._encode(rmd)
        except Exception:
            log.error("error during get_request_metadata", exc_info=True)
            return None

    def process_response_metadata(self, raw, segment):
        # type: (Union[str, bytes], Optional[ExternalRequestSegment]) -> Optional[CrossAppResponse]
        """Reads the response metadata a called application returned, and records it on ``segment``."""
        if not self.enabled or segment is None:
            return None

        try:
            response = self._parse_response_metadata(raw)
        except UntrustedIdentifier as e:
            log.error("error processing response metadata: %s", e)
            return None
        except Exception:
            log.error("error during process_response_metadata", exc_info=True)
            return None

        segment.process_response_metadata(response)
        return response

    def _parse_response_metadata(self, raw):
        # type: (Union[str, bytes]) -> CrossAppResponse
        app_data = self._decode(raw).get(CAT_APP_DATA_KEY)
        if not isinstance(app_data, list) or len(app_data) < 6:
            raise MalformedPayload("%s must be a list of 6 elements" % CAT_APP_DATA_KEY)

        cross_process_id = app_data[0]
        if not self.trust_registry.is_trusted(cross_process_id):
            raise UntrustedIdentifier(cross_process_id)

        content_length = app_data[4] if is_integer(app_data[4]) else CAT_APP_DATA_CONTENT_LENGTH
        return CrossAppResponse(
            cross_process_id=cross_process_id,
            transaction_name=app_data[1],
            queue_time_in_seconds=float(app_data[2]),
            app_time_in_seconds=float(app_data[3]),
            content_length=content_length,
            transaction_guid=app_data[5],
        )
