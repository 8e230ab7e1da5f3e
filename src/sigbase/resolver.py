import logging

from sigbase.component import Component, describe
from sigbase.request import Request
from sigbase.result import Error, Result
from sigbase.status import Kind

logger = logging.getLogger(__name__)


def resolve(component: Component, request: Request) -> Result[str]:
    """Returns the value of a component of the request.

    Derived components (names starting with "@") are computed from the
    request method and URL; any other name is looked up in the request
    headers, case-insensitively.
    """
    try:
        match component.name:
            case "@method":
                return Result.ok(request.method)
            case "@target-uri":
                return Result.ok(request.url)
            case "@authority":
                return Result.ok(request.authority)
            case "@scheme":
                return Result.ok(request.scheme)
            case "@path":
                return Result.ok(request.path)
            case "@request-target":
                return Result.ok(request.path + request.query)
            case "@query":
                return Result.ok(request.query)
            case "@query-param":
                return _resolve_query_param(component, request)
    except ValueError as e:
        # urlsplit rejects some malformed URLs (e.g. non numeric ports)
        # only when the offending part is accessed.
        return Result.err(
            Error(
                Kind.VALIDATION,
                "Invalid request URL",
                f"Request URL cannot be used to resolve field {describe(component)}: {e}",
            )
        )

    return _resolve_header(component, request)


def _resolve_query_param(component: Component, request: Request) -> Result[str]:
    name = component.parameters.get("name")
    if not name:
        return Result.err(
            Error(
                Kind.VALIDATION,
                "Invalid signature input",
                'Signature input is missing required parameter "name" in signature input for field '
                + describe(component),
            )
        )

    name = str(name)
    value = request.query_param(name)
    if value is None:
        logger.debug("query parameter '%s' not found in request URL", name)
        return Result.err(
            Error(
                Kind.VALIDATION,
                f"Missing query parameter: {name}",
                f'Request is missing query parameter "{name}" required in signature input for field '
                + describe(component),
            )
        )
    return Result.ok(value)


def _resolve_header(component: Component, request: Request) -> Result[str]:
    value = request.header(component.name)
    if value is None:
        logger.debug("header '%s' not found in request", component.name)
        return Result.err(
            Error(
                Kind.VALIDATION,
                f"Missing header: {component.name}",
                f'Request is missing header "{component.name}" required in signature input for field '
                + describe(component),
            )
        )
    return Result.ok(value)

