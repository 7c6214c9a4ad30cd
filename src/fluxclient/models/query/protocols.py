from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class RenderableProtocol(Protocol):
    """
    Structural protocol for objects that can be sent to the query endpoint.

    A class implicitly satisfies this protocol if it exposes a `render()` method
    returning the query-language text. The [`InfluxClient`][fluxclient.comm.InfluxClient]
    accepts these objects interchangeably with plain strings, so callers can plug in
    their own query representations without subclassing
    [`Query`][fluxclient.models.query.builders.Query].
    """

    def render(self) -> str:
        """Returns the query-language text sent as the `q` parameter."""
        ...


QueryLike = Union[str, RenderableProtocol]


def render_query(query: object) -> str:
    """Renders any supported query representation to its wire text."""
    if isinstance(query, RenderableProtocol):
        return query.render()
    return str(query)
