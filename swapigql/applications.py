import inspect
import json
import logging
import traceback
import typing

from gql.playground import PLAYGROUND_HTML
from gql.resolver import default_field_resolver
from graphql import ExecutionResult, GraphQLError, GraphQLSchema, execute, parse, validate
from starlette import status
from starlette.applications import Starlette
from starlette.background import BackgroundTasks
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.routing import BaseRoute, Route
from starlette.types import Receive, Scope, Send

from .errors import GatewayError
from .schema import validation_rules

logger = logging.getLogger(__name__)

ERROR_FORMATER = typing.Callable[[GraphQLError], typing.Dict[str, typing.Any]]


async def run_graphql(
    schema: GraphQLSchema,
    query: str,
    variables: typing.Dict[str, typing.Any] = None,
    operation_name: str = None,
    context: typing.Any = None,
) -> ExecutionResult:
    try:
        document = parse(query)
    except GraphQLError as error:
        return ExecutionResult(data=None, errors=[error])

    errors = validate(schema, document, validation_rules)
    if errors:
        return ExecutionResult(data=None, errors=errors)

    result = execute(
        schema,
        document,
        variable_values=variables,
        operation_name=operation_name,
        context_value=context,
        field_resolver=default_field_resolver,
    )
    if inspect.isawaitable(result):
        result = await result
    return result


class GraphQL(Starlette):
    def __init__(
        self,
        schema: GraphQLSchema,
        *,
        playground: bool = True,
        debug: bool = False,
        routes: typing.List[BaseRoute] = None,
        path: str = '/graphql',
        error_formater: ERROR_FORMATER = None,
        context_builder: typing.Callable = None,
        **kwargs,
    ):
        routes = routes or []
        self.schema = schema
        routes.append(
            Route(
                path,
                ASGIApp(
                    self.schema,
                    debug=debug,
                    playground=playground,
                    error_formater=error_formater,
                    context_builder=context_builder,
                ),
            )
        )
        super().__init__(debug=debug, routes=routes, **kwargs)


class ASGIApp:
    def __init__(
        self,
        schema: GraphQLSchema,
        debug: bool = False,
        playground: bool = True,
        error_formater: ERROR_FORMATER = None,
        context_builder: typing.Callable = None,
    ) -> None:
        self.schema = schema
        self.playground = playground
        self.error_formater = error_formater or self.format_error
        self.debug = debug
        self.context_builder = context_builder

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive=receive, send=send)
        response = await self.handle_graphql(request)
        await response(scope, receive, send)

    def format_error(self, error: GraphQLError) -> typing.Dict[str, typing.Any]:
        if not error:
            raise ValueError("Received null or undefined error.")
        formatted = dict(  # noqa: E701 (pycqa/flake8#394)
            message=error.message or "An unknown error occurred.",
            locations=[l._asdict() for l in error.locations] if error.locations else None,
            path=error.path,
        )
        extensions = dict(error.extensions or {})
        original_error = error.original_error
        if isinstance(original_error, GatewayError):
            extensions['code'] = original_error.code
        if self.debug and original_error:
            exception = extensions.get('exception', {})
            exception['traceback'] = traceback.format_exception(
                type(original_error), original_error, original_error.__traceback__
            )
            extensions['exception'] = exception
        if extensions:
            formatted.update(extensions=extensions)
        return formatted

    async def handle_graphql(self, request: Request) -> Response:
        if request.method in ('GET', 'HEAD'):
            if 'text/html' in request.headers.get('Accept', ''):
                if not self.playground:
                    return PlainTextResponse('Not Found', status_code=status.HTTP_404_NOT_FOUND)
                return HTMLResponse(PLAYGROUND_HTML)

            data = request.query_params  # type: typing.Mapping[str, typing.Any]

        elif request.method == 'POST':
            content_type = request.headers.get('Content-Type', '')

            if 'application/json' in content_type:
                try:
                    data = await request.json()
                except ValueError:
                    return PlainTextResponse(
                        'Request body is not valid JSON', status_code=status.HTTP_400_BAD_REQUEST,
                    )
            elif 'application/graphql' in content_type:
                body = await request.body()
                data = {'query': body.decode()}
            elif 'query' in request.query_params:
                data = request.query_params
            else:
                return PlainTextResponse(
                    'Unsupported Media Type', status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                )
        else:
            return PlainTextResponse(
                'Method Not Allowed', status_code=status.HTTP_405_METHOD_NOT_ALLOWED
            )

        try:
            query = data['query']
            variables = data.get('variables')
            operation_name = data.get('operationName')
        except (KeyError, TypeError, AttributeError):
            return PlainTextResponse(
                'No GraphQL query found in the request', status_code=status.HTTP_400_BAD_REQUEST,
            )

        # Query strings carry variables as a JSON document.
        if isinstance(variables, str):
            try:
                variables = json.loads(variables) if variables else None
            except ValueError:
                return PlainTextResponse(
                    'Variables are invalid JSON', status_code=status.HTTP_400_BAD_REQUEST,
                )

        if not isinstance(query, str):
            return PlainTextResponse(
                'GraphQL query must be a string', status_code=status.HTTP_400_BAD_REQUEST,
            )
        if variables is not None and not isinstance(variables, dict):
            return PlainTextResponse(
                'Variables must be an object', status_code=status.HTTP_400_BAD_REQUEST,
            )
        if operation_name is not None and not isinstance(operation_name, str):
            return PlainTextResponse(
                'Operation name must be a string', status_code=status.HTTP_400_BAD_REQUEST,
            )

        background = BackgroundTasks()
        context = self.context_builder() if self.context_builder else {}
        context.update(request=request, background=background)

        result = await run_graphql(self.schema, query, variables, operation_name, context)
        response_data = {'data': result.data}
        if result.errors:
            for err in result.errors:
                logger.warning('GraphQL error at %s: %s', err.path, err.message)
            response_data['errors'] = [self.error_formater(err) for err in result.errors]

        return JSONResponse(response_data, status_code=status.HTTP_200_OK, background=background)
