from .builders import Query as Query
from .protocols import (
    QueryLike as QueryLike,
    RenderableProtocol as RenderableProtocol,
    render_query as render_query,
)
from .response import (
    QueryResponse as QueryResponse,
    ResultGroup as ResultGroup,
    Row as Row,
    Series as Series,
    decode_response as decode_response,
)
