"""
Helpers to instrument external requests and to link transactions across
applications when the transport is not one supported out of the box.

Usage on the called application::

    import cattrace
    from cattrace import external

    with cattrace.Transaction(name="Controller/orders"):
        external.process_request_metadata(message.headers["X-NewRelic-ID"])
        ...
        reply.headers["X-NewRelic-App-Data"] = external.get_response_metadata()

Usage on the calling application::

    segment = external.start_segment(library="kombu", uri="amqp://broker/orders", procedure="publish")
    message.headers["X-NewRelic-ID"] = external.get_request_metadata()
    reply = send(message)
    external.process_response_metadata(reply.headers["X-NewRelic-App-Data"])
    segment.finish()

The metadata functions act on the transaction active in the current context
and never raise.
"""
from typing import Any
from typing import Optional
from typing import Union

import cattrace

from ._trace.segment import ExternalRequestSegment
from ._trace.transaction import TransactionProvider
from .errors import ConfigurationMissing
from .propagation.cross_app import CrossAppPropagator
from .propagation.cross_app import CrossAppResponse


provider = TransactionProvider()

_propagator: Optional[CrossAppPropagator] = None


def get_propagator() -> CrossAppPropagator:
    global _propagator
    if _propagator is None:
        _propagator = CrossAppPropagator(cattrace.config)
    return _propagator


def set_propagator(propagator: Optional[CrossAppPropagator]) -> None:
    """Replaces the propagator used by this module; ``None`` rebuilds it from ``cattrace.config``."""
    global _propagator
    _propagator = propagator


def start_segment(library: Optional[str] = None, uri: Any = None, procedure: Optional[str] = None):
    # type: (...) -> ExternalRequestSegment
    """Creates and starts a segment timing an external request.

    :param library: name of the library making the call, e.g. ``"requests"``
    :param uri: URI the request is made to, including the scheme
    :param procedure: method or verb of the call, e.g. ``"GET"``
    :raises ConfigurationMissing: when an argument is not given
    """
    if library is None:
        raise ConfigurationMissing("library")
    if uri is None:
        raise ConfigurationMissing("uri")
    if procedure is None:
        raise ConfigurationMissing("procedure")

    segment = ExternalRequestSegment(library, uri, procedure)
    transaction = provider.active()
    if transaction is not None:
        transaction.add_segment(segment)
    return segment.start()


def process_request_metadata(request_metadata: Union[str, bytes]) -> None:
    get_propagator().process_request_metadata(request_metadata, provider.active())


def get_response_metadata() -> Optional[str]:
    return get_propagator().get_response_metadata(provider.active())


def get_request_metadata() -> Optional[str]:
    return get_propagator().get_request_metadata(provider.active())


def process_response_metadata(response_metadata: Union[str, bytes]) -> Optional[CrossAppResponse]:
    transaction = provider.active()
    if transaction is None:
        return None
    return get_propagator().process_response_metadata(response_metadata, transaction.current_segment)
